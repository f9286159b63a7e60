"""
Group assignment by snake draft.

Competitors are ordered by rating and dealt into groups row by row,
alternating direction each row so every group gets a comparable mix of
strong and weak players:

    row 0:  A B C D
    row 1:  D C B A
    row 2:  A B C D
"""
import logging
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_SETTINGS
from .models import ACTIVE, STANDBY, Competitor

logger = logging.getLogger(__name__)


def choose_group_count(population: int, settings: Optional[Dict] = None) -> int:
    """Pick 3, 4 or 5 groups from the number of registered competitors."""
    rules = (settings or DEFAULT_SETTINGS)['group_count_rules']
    if population >= rules['five_groups_min']:
        return 5
    elif population > rules['four_groups_above']:
        return 4
    return 3


def snake_order(group_names: List[str], rows: int) -> List[str]:
    """Group label for each draft position, alternating direction per row."""
    order = []
    forward = True
    for _ in range(rows):
        row = list(group_names) if forward else list(reversed(group_names))
        order.extend(row)
        forward = not forward
    return order


def assign_groups(competitors: List[Competitor], settings: Optional[Dict] = None) -> Tuple[List[Competitor], int]:
    """
    Distribute competitors into balanced groups.

    Only the largest multiple of the group count is placed; the lowest-rated
    remainder is put on standby without a group.

    Args:
        competitors: Full competitor list (not modified).
        settings: Optional settings dict (group names and count rules).

    Returns:
        (competitors with group/status rewritten, in input order, group count)
    """
    settings = settings or DEFAULT_SETTINGS
    group_count = choose_group_count(len(competitors), settings)
    group_names = settings['group_names'][:group_count]

    ranked = sorted(competitors, key=lambda c: -c.rating)
    rows = len(ranked) // group_count
    playable_count = rows * group_count
    order = snake_order(group_names, rows)

    placement = {}
    for position, competitor in enumerate(ranked[:playable_count]):
        placement[competitor.id] = order[position]

    assigned = []
    for competitor in competitors:
        group = placement.get(competitor.id)
        if group is None:
            assigned.append(competitor.replace(group=None, status=STANDBY))
        else:
            assigned.append(competitor.replace(group=group, status=ACTIVE))

    logger.debug(f'Assigned {playable_count} of {len(competitors)} competitors to {group_count} groups, '
                 f'{len(competitors) - playable_count} on standby')
    return assigned, group_count
