"""
Tests for fuzzy rider-name matching.
"""

from dataclasses import dataclass

import pytest

from randonneurs.features.riders.matching import (
    are_nickname_equivalent,
    find_fuzzy_name_matches,
    fuzzy_name_score,
    get_name_variants,
    levenshtein_distance,
    normalize_name,
    similarity_score,
)


@dataclass
class Person:
    first_name: str
    last_name: str


# =============================================================================
# String Distance
# =============================================================================

class TestLevenshtein:
    @pytest.mark.parametrize("a,b,expected", [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("Smith", "smith", 0),
        ("micheal", "michael", 2),
    ])
    def test_distance(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_similarity_identical(self):
        assert similarity_score("smith", "smith") == 1.0

    def test_similarity_empty(self):
        assert similarity_score("", "") == 1.0

    def test_similarity_disjoint(self):
        assert similarity_score("abc", "xyz") == 0.0


class TestNormalize:
    def test_strips_punctuation_and_case(self):
        assert normalize_name("O'Callahan") == "ocallahan"

    def test_strips_spaces_and_hyphens(self):
        assert normalize_name(" Smith-Jones ") == "smithjones"


# =============================================================================
# Nicknames
# =============================================================================

class TestNicknames:
    def test_variants_from_nickname(self):
        variants = get_name_variants("Bob")
        assert variants[0] == "bob"
        assert "robert" in variants
        assert "rob" in variants

    def test_variants_from_canonical(self):
        variants = get_name_variants("William")
        assert {"william", "bill", "will", "liam"} <= set(variants)

    def test_unknown_name_has_only_itself(self):
        assert get_name_variants("Zebulon") == ["zebulon"]

    def test_no_duplicates(self):
        variants = get_name_variants("chris")
        assert len(variants) == len(set(variants))

    @pytest.mark.parametrize("a,b", [
        ("bob", "robert"),
        ("robert", "bob"),
        ("bob", "rob"),
        ("liz", "beth"),
        ("anna", "anna"),
    ])
    def test_equivalent(self, a, b):
        assert are_nickname_equivalent(a, b)

    def test_not_equivalent(self):
        assert not are_nickname_equivalent("bob", "bill")


# =============================================================================
# Name Score
# =============================================================================

class TestFuzzyNameScore:
    def test_exact_match(self):
        assert fuzzy_name_score("Jane", "Doe", "Jane", "Doe") == 1.0

    def test_case_and_punctuation_insensitive(self):
        assert fuzzy_name_score("shannon", "ocallahan", "Shannon", "O'Callahan") == 1.0

    def test_apostrophe_ignored(self):
        assert fuzzy_name_score("Tim", "Ocallahan", "Tim", "O'Callahan") == 1.0

    def test_nickname_counts_as_same_first_name(self):
        assert fuzzy_name_score("Bob", "Smith", "Robert", "Smith") == 1.0

    def test_transposed_letters(self):
        score = fuzzy_name_score("Micheal", "Smith", "Michael", "Smith")
        assert score == pytest.approx(0.857, abs=1e-3)

    def test_swapped_order_scored_slightly_lower(self):
        score = fuzzy_name_score("Smith", "John", "John", "Smith")
        assert score == pytest.approx(0.9)

    def test_unrelated_names_score_low(self):
        assert fuzzy_name_score("Alice", "Wong", "Bob", "Smith") < 0.3

    def test_score_in_range(self):
        for names in [("a", "b", "c", "d"), ("", "", "x", "y"), ("Ann", "Lee", "Anne", "Leigh")]:
            assert 0.0 <= fuzzy_name_score(*names) <= 1.0


class TestFindFuzzyNameMatches:
    CANDIDATES = [
        Person("Robert", "Smith"),
        Person("Roberta", "Smyth"),
        Person("Alice", "Wong"),
        Person("Bob", "Smith"),
    ]

    def test_best_first_and_threshold(self):
        matches = find_fuzzy_name_matches("Bob", "Smith", self.CANDIDATES, threshold=0.5)
        names = [(m.item.first_name, m.item.last_name) for m in matches]
        assert ("Alice", "Wong") not in names
        assert [m.score for m in matches] == sorted((m.score for m in matches), reverse=True)

    def test_ties_keep_input_order(self):
        matches = find_fuzzy_name_matches("Bob", "Smith", self.CANDIDATES, threshold=0.99)
        assert [m.item.first_name for m in matches] == ["Robert", "Bob"]

    def test_max_results(self):
        matches = find_fuzzy_name_matches("Bob", "Smith", self.CANDIDATES, threshold=0.0, max_results=2)
        assert len(matches) == 2

    def test_custom_accessors(self):
        rows = [{"f": "Jane", "l": "Doe"}]
        matches = find_fuzzy_name_matches(
            "Jane", "Doe", rows,
            get_first=lambda r: r["f"],
            get_last=lambda r: r["l"],
        )
        assert matches[0].score == 1.0
