"""Fixed text printed on the front of every control card."""

PREAMBLE = "Event Organized Under the Rules and Regulations of Les Randonneurs Mondiaux."

EMERGENCY = "Emergency Services: 911"

REGULATIONS = [
    (
        "REGULATIONS: Each participant is to be considered a private excursion and "
        "remains responsible for any accidents in which they may be involved. Each "
        "participant is responsible for following the route. Although Randonneurs "
        "Ontario will endeavor to ensure that all route instructions are correct, no "
        "responsibility can be accepted for participants becoming lost. Should a "
        "participant become lost or stranded by mechanical problems or fatigue, it "
        "will be their responsibility to get home."
    ),
    'There will be no "sag wagon"',
    (
        "CONTROL CARD: The participant to whom this card is issued must present it at "
        "each control for the official stamp, signature and control time. Loss of this "
        "card, or absence of any of the control stamps, or any irregularity in stamping "
        "or signing of the card will result in disqualification."
    ),
    (
        "CONDUCT: Participants must at all times obey the rules of the road and conduct "
        "themselves in a manner which will not discredit the Randonneurs Ontario "
        "organization. Failure to do so will result in disqualification."
    ),
    (
        "CYCLE: Any cycle permitted (bicycle, tandem, tricycle etc.) providing it is "
        "powered by muscle power alone. Powerful front and rear lights must be attached "
        "to the cycle night and day. The cycle must be in good mechanical condition to "
        "participate in the event."
    ),
    (
        "ASSISTANCE: Each participant must provide for their needs during the event. "
        "Following vehicles are not permitted. Mechanical and personal assistance may "
        "only be received at control points."
    ),
]
