"""
shared fixtures for the facnet test suite.
"""

import pytest

from facnet.core.models import Faculty, default_research_topics


def build_faculty(email, first="Test", last=None, school=None, department=None,
                  rank=None, **scores):
    """faculty record with the given topic scores, all others 0."""
    handle = email.split("@")[0]
    return Faculty(
        id=handle,
        first_name=first,
        last_name=last or handle.title(),
        email=email,
        school=school,
        department=department,
        academic_rank=rank,
        expertise=scores
    )


@pytest.fixture
def make_faculty():
    return build_faculty


@pytest.fixture
def topics():
    """the canonical 21-topic catalogue."""
    return default_research_topics()


@pytest.fixture
def abc_roster():
    """alice / bob / carol roster used across search and api tests."""
    return [
        build_faculty("alice@example.edu", first="Alice", last="Adams", school="Environment", climate=5, energy=3),
        build_faculty("bob@example.edu", first="Bob", last="Baker", school="Engineering", climate=4, water=2),
        build_faculty("carol@example.edu", first="Carol", last="Chen", school="Law", energy=5),
    ]
