#!/usr/bin/env python3
"""
test expertise model, relevance scoring and faculty search.

run with: pytest test_scoring.py -v
"""

import pytest

from facnet.core.config import SearchConfig
from facnet.core.models import (
    Faculty, ExpertiseScores, TOPIC_KEYS, clamp_expertise, validate_faculty_row
)
from facnet.scoring import (
    FacultySearch, SearchFilters, SearchSummary,
    score_relevance, normalize_selection, search_faculty
)
from conftest import build_faculty


# =============================================================================
# Expertise Model
# =============================================================================

class TestExpertiseModel:
    """test row typing and derived fields."""

    def test_scores_clamped_and_defaulted(self):
        faculty = Faculty.from_row({
            "id": "1",
            "first_name": "Dana",
            "last_name": "Diaz",
            "email": "Dana.Diaz@Example.EDU ",
            "climate": 7,
            "energy": -2,
            "water": "3",
            "food": "lots",
            "land": None,
        })

        assert faculty.expertise["climate"] == 5
        assert faculty.expertise["energy"] == 0
        assert faculty.expertise["water"] == 3
        assert faculty.expertise["food"] == 0
        assert faculty.expertise["land"] == 0
        assert len(faculty.expertise) == len(TOPIC_KEYS) == 21
        assert faculty.email == "dana.diaz@example.edu"

    def test_blank_metadata_becomes_none(self):
        faculty = Faculty.from_row({
            "id": "2", "first_name": "Eli", "last_name": "Evans",
            "email": "eli@example.edu", "school": "  ", "department": "Biology",
        })
        assert faculty.school is None
        assert faculty.department == "Biology"

    def test_unknown_key_is_checked(self):
        scores = ExpertiseScores({"climate": 2})
        assert scores.get("astrology") == 0
        assert not scores.is_known("astrology")
        with pytest.raises(KeyError):
            scores["astrology"]

    def test_breadth_and_bridge(self):
        narrow = build_faculty("n@example.edu", climate=5)
        broad = build_faculty("b@example.edu", climate=1, energy=1, water=1, food=1)

        assert narrow.expertise_breadth == 1
        assert not narrow.is_bridge_connector
        assert broad.expertise_breadth == 4
        assert broad.is_bridge_connector

    def test_clamp_expertise(self):
        assert clamp_expertise(4.7) == 4
        assert clamp_expertise(True) == 0
        assert clamp_expertise("") == 0
        assert clamp_expertise(99) == 5

    def test_clamp_non_finite(self):
        assert clamp_expertise(float("inf")) == 5
        assert clamp_expertise("inf") == 5
        assert clamp_expertise(float("-inf")) == 0
        assert clamp_expertise("nan") == 0
        assert clamp_expertise(10 ** 400) == 0

    def test_from_row_coerces_non_string_fields(self):
        faculty = Faculty.from_row({
            "id": 1, "first_name": 7, "last_name": None,
            "email": " X@Example.edu ", "climate": float("inf"),
        })

        assert faculty.id == "1"
        assert faculty.first_name == "7"
        assert faculty.last_name == ""
        assert faculty.email == "x@example.edu"
        assert faculty.expertise_in("climate") == 5

    def test_validate_faculty_row(self):
        ok, issues = validate_faculty_row({"id": "1", "email": "a@b.edu", "first_name": "A"})
        assert ok and issues == []

        ok, issues = validate_faculty_row({"id": "", "email": "nope"})
        assert not ok
        assert "no identifier found" in issues
        assert any("malformed email" in i for i in issues)
        assert "missing name" in issues


# =============================================================================
# Relevance Scorer
# =============================================================================

class TestRelevanceScorer:
    """test the mean-over-selection relevance score."""

    def test_mean_includes_zeros(self):
        bob = build_faculty("bob@example.edu", climate=4, water=2)
        result = score_relevance(bob, ["climate", "energy"])

        assert result.score == 2.0
        assert result.matched_topics == ["climate"]

    def test_empty_selection(self):
        alice = build_faculty("alice@example.edu", climate=5)
        result = score_relevance(alice, [])

        assert result.score == 0
        assert result.matches == []

    def test_matches_sorted_desc_stable(self):
        faculty = build_faculty("f@example.edu", climate=2, energy=4, water=2)
        result = score_relevance(faculty, ["climate", "energy", "water"])

        assert [(m.topic, m.score) for m in result.matches] == [
            ("energy", 4), ("climate", 2), ("water", 2)
        ]

    def test_unknown_key_counts_in_denominator(self):
        faculty = build_faculty("f@example.edu", climate=4)
        result = score_relevance(faculty, ["climate", "astrology"])

        assert result.score == 2.0
        assert result.matched_topics == ["climate"]

    def test_duplicate_keys_collapse(self):
        faculty = build_faculty("f@example.edu", climate=4)
        assert score_relevance(faculty, ["climate", "climate"]).score == 4.0

    def test_score_bounds(self):
        faculty = build_faculty("f@example.edu", climate=5, energy=5, water=5)
        for selection in (["climate"], ["climate", "energy", "water"], ["food", "land"]):
            score = score_relevance(faculty, selection).score
            assert 0 <= score <= 5

    def test_normalize_selection_truncates(self):
        assert normalize_selection(["a", "b", "a", "c", "d"], max_topics=3) == ["a", "b", "c"]
        assert normalize_selection(["a", "b"]) == ["a", "b"]


# =============================================================================
# Faculty Search
# =============================================================================

class TestFacultySearch:
    """test candidate filtering, ranking and summaries."""

    def test_end_to_end_ranking(self, abc_roster):
        results = search_faculty(abc_roster, ["climate", "energy"])

        assert [r.first_name for r in results] == ["Alice", "Carol", "Bob"]
        assert [r.relevance_score for r in results] == [4.0, 2.5, 2.0]

    def test_no_selection_returns_nothing(self, abc_roster):
        assert search_faculty(abc_roster, []) == []

    def test_never_returns_zero_scores(self, abc_roster):
        results = search_faculty(abc_roster, ["water", "food"])

        assert [r.email for r in results] == ["bob@example.edu"]
        assert all(r.relevance_score > 0 for r in results)

    def test_ties_keep_breadth_order(self):
        # equal relevance; the broader profile sorts first regardless of roster order
        narrow = build_faculty("narrow@example.edu", climate=3)
        broad = build_faculty("broad@example.edu", climate=3, water=1)

        results = search_faculty([narrow, broad], ["climate"])

        assert [r.email for r in results] == ["broad@example.edu", "narrow@example.edu"]
        assert results[0].relevance_score == results[1].relevance_score == 3.0

    def test_cap_applies_to_broadest_candidates(self):
        roster = [
            build_faculty("one@example.edu", climate=5),
            build_faculty("two@example.edu", climate=1, energy=1),
            build_faculty("three@example.edu", climate=1, energy=1, water=1),
        ]
        search = FacultySearch(SearchConfig(max_results=2))
        results = search.search(roster, ["climate"])

        assert {r.email for r in results} == {"two@example.edu", "three@example.edu"}

    def test_min_relevance_floor(self, abc_roster):
        results = FacultySearch().search(abc_roster, ["climate", "energy"], min_relevance=2.5)
        assert [r.first_name for r in results] == ["Alice", "Carol"]

    def test_selection_truncated_to_three(self, abc_roster):
        results = search_faculty(abc_roster, ["climate", "energy", "food", "water"])

        # water is dropped, so bob only matches climate
        bob = next(r for r in results if r.first_name == "Bob")
        assert bob.relevance_score == pytest.approx(4 / 3)

    def test_topic_matches_attached(self, abc_roster):
        alice = search_faculty(abc_roster, ["climate", "energy"])[0]
        assert [(m.topic, m.score) for m in alice.topic_matches] == [("climate", 5), ("energy", 3)]
        assert alice.to_dict()["relevance_score"] == 4.0

    def test_filters(self, abc_roster):
        search = FacultySearch()
        by_school = search.search(abc_roster, ["climate", "energy"], SearchFilters(school="law"))
        by_term = search.search(abc_roster, ["climate", "energy"], SearchFilters(search_term="adams"))

        assert [r.first_name for r in by_school] == ["Carol"]
        assert [r.first_name for r in by_term] == ["Alice"]

    def test_summary(self, abc_roster):
        results = search_faculty(abc_roster, ["climate", "energy"])
        summary = SearchSummary.from_results(results)

        assert summary.total == 3
        assert summary.interdisciplinary == 0
        # mean (4 + 2.5 + 2) / 3 on a 5-point scale
        assert summary.average_match_percent == 57

    def test_summary_empty(self):
        summary = SearchSummary.from_results([])
        assert (summary.total, summary.interdisciplinary, summary.average_match_percent) == (0, 0, 0)
