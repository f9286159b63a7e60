"""
Shared pytest fixtures for tournament engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from arena.models import Competitor


def make_competitors(ratings, groups=None):
    """Competitors p1..pN with the given ratings, optionally pre-grouped."""
    competitors = []
    for index, rating in enumerate(ratings):
        competitors.append(Competitor(
            id=f"p{index + 1}",
            name=f"Player {index + 1}",
            rating=rating,
            external_id=f"ext{index + 1}",
            group=groups[index] if groups else None,
        ))
    return competitors


@pytest.fixture
def field_of():
    """Factory fixture building a competitor field from ratings."""
    return make_competitors


@pytest.fixture
def eight_seeds():
    """Eight qualifiers, two per group, seeded 1..8 by rating (p1 is seed 1)."""
    ratings = [5000, 4800, 4600, 4400, 4200, 4000, 3800, 3600]
    groups = ['A', 'B', 'C', 'D', 'D', 'C', 'B', 'A']
    return make_competitors(ratings, groups)


@pytest.fixture
def six_seeds():
    """Six qualifiers in three groups, seeded 1..6 by rating."""
    ratings = [5000, 4800, 4600, 4400, 4200, 4000]
    groups = ['A', 'B', 'C', 'C', 'B', 'A']
    return make_competitors(ratings, groups)


@pytest.fixture
def ten_seeds():
    """Ten qualifiers in five groups, seeded 1..10 by rating."""
    ratings = [5000, 4800, 4600, 4400, 4200, 4000, 3800, 3600, 3400, 3200]
    groups = ['A', 'B', 'C', 'D', 'E', 'E', 'D', 'C', 'B', 'A']
    return make_competitors(ratings, groups)


@pytest.fixture
def twelve_players():
    """Twelve registrants: 3 groups of 4 once drawn."""
    return make_competitors([3000 + 100 * i for i in range(12)])
