"""
Tests for snake-draft group assignment.
"""
import pytest
import sys
import os
from collections import Counter

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from arena.config import get_default_settings
from arena.groups import assign_groups, choose_group_count, snake_order
from arena.models import ACTIVE, STANDBY


class TestChooseGroupCount:
    """Group count thresholds."""

    def test_small_fields_use_three_groups(self):
        assert choose_group_count(0) == 3
        assert choose_group_count(12) == 3
        assert choose_group_count(18) == 3

    def test_above_eighteen_uses_four(self):
        assert choose_group_count(19) == 4
        assert choose_group_count(24) == 4

    def test_twenty_five_and_up_uses_five(self):
        assert choose_group_count(25) == 5
        assert choose_group_count(60) == 5

    def test_thresholds_from_settings(self):
        settings = get_default_settings()
        settings['group_count_rules'] = {'five_groups_min': 10, 'four_groups_above': 6}
        assert choose_group_count(6, settings) == 3
        assert choose_group_count(7, settings) == 4
        assert choose_group_count(10, settings) == 5


class TestSnakeOrder:

    def test_rows_alternate_direction(self):
        assert snake_order(['A', 'B', 'C'], 3) == ['A', 'B', 'C', 'C', 'B', 'A', 'A', 'B', 'C']

    def test_zero_rows(self):
        assert snake_order(['A', 'B', 'C'], 0) == []


class TestAssignGroups:
    """Tests for assign_groups."""

    def test_even_split(self, twelve_players):
        """12 players -> 3 groups of 4, nobody on standby."""
        assigned, group_count = assign_groups(twelve_players)
        assert group_count == 3
        assert Counter(c.group for c in assigned) == {'A': 4, 'B': 4, 'C': 4}
        assert all(c.status == ACTIVE for c in assigned)

    def test_snake_placement(self, twelve_players):
        """Highest rated go A, B, C then C, B, A on the next row."""
        assigned, _ = assign_groups(twelve_players)
        by_rating = sorted(assigned, key=lambda c: -c.rating)
        assert [c.group for c in by_rating] == ['A', 'B', 'C', 'C', 'B', 'A', 'A', 'B', 'C', 'C', 'B', 'A']

    def test_input_order_preserved(self, twelve_players):
        assigned, _ = assign_groups(twelve_players)
        assert [c.id for c in assigned] == [c.id for c in twelve_players]

    def test_input_not_mutated(self, twelve_players):
        assign_groups(twelve_players)
        assert all(c.group is None for c in twelve_players)

    @pytest.mark.parametrize("population", [0, 1, 2, 5, 13, 18, 19, 23, 25, 27, 31])
    def test_group_sizes_and_standby(self, field_of, population):
        """floor(n/g) per group, n mod g on standby with no group."""
        competitors = field_of([1000 + 37 * i for i in range(population)])
        assigned, group_count = assign_groups(competitors)
        per_group = population // group_count
        sizes = Counter(c.group for c in assigned if c.status == ACTIVE)
        if per_group:
            assert sorted(sizes.values()) == [per_group] * group_count
        else:
            assert not sizes
        standby = [c for c in assigned if c.status == STANDBY]
        expected_standby = population % group_count if per_group else population
        assert len(standby) == expected_standby
        assert all(c.group is None for c in standby)

    def test_lowest_rated_go_to_standby(self, field_of):
        """14 players make 3 groups of 4; the two lowest rated sit out."""
        competitors = field_of([100 * i for i in range(14)])
        assigned, _ = assign_groups(competitors)
        standby = {c.id for c in assigned if c.status == STANDBY}
        assert standby == {'p1', 'p2'}

    def test_too_few_players_all_standby(self, field_of):
        assigned, group_count = assign_groups(field_of([1500, 1200]))
        assert group_count == 3
        assert all(c.status == STANDBY and c.group is None for c in assigned)

    def test_ties_keep_registration_order(self, field_of):
        """Equal ratings are drafted in list order."""
        assigned, _ = assign_groups(field_of([2000, 2000, 2000]))
        assert [c.group for c in assigned] == ['A', 'B', 'C']

    def test_reassignment_resets_previous_groups(self, twelve_players):
        """Previously grouped competitors pushed to standby lose their group."""
        assigned, _ = assign_groups(twelve_players)
        assert all(c.group for c in assigned)

        # Dropping the top player leaves 11: 3 groups of 3, two on standby.
        reassigned, _ = assign_groups([c for c in assigned if c.id != 'p12'])
        standby = {c.id: c for c in reassigned if c.status == STANDBY}
        assert set(standby) == {'p1', 'p2'}
        assert all(c.group is None for c in standby.values())
