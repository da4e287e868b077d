"""Feature modules: brevets, events, results, riders, control_cards, calendar."""
