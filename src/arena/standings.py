"""
Standings and qualification.

Standings are never stored on their own: they are rebuilt from the full
match list (group and playoff) every time a match changes.
"""
from typing import Dict, List, Optional

from .config import DEFAULT_SETTINGS
from .models import FINISHED, Competitor, Match


def compute_standings(competitors: List[Competitor], matches: List[Match]) -> List[Competitor]:
    """
    Recompute points, wins and losses for every competitor.

    - points: the competitor's own score summed over finished matches
    - wins: finished matches they won
    - losses: finished matches won by their opponent

    A tied finish has no winner and adds points only. Pending and invalidated
    matches count for nothing. A BYE slot is never credited.
    """
    stats = {c.id: {'points': 0, 'wins': 0, 'losses': 0} for c in competitors}

    for match in matches:
        if match.status != FINISHED:
            continue
        for competitor_id, score in ((match.slot1, match.score1), (match.slot2, match.score2)):
            if competitor_id not in stats:
                continue
            stats[competitor_id]['points'] += score
            if match.winner_id is None:
                continue
            if match.winner_id == competitor_id:
                stats[competitor_id]['wins'] += 1
            else:
                stats[competitor_id]['losses'] += 1

    return [c.replace(**stats[c.id]) for c in competitors]


def rank_key(competitor: Competitor):
    """Sort key: points, then wins, then rating, all descending."""
    return (-competitor.points, -competitor.wins, -competitor.rating)


def group_table(competitors: List[Competitor], group: str) -> List[Competitor]:
    """Members of a group ordered by rank_key."""
    return sorted((c for c in competitors if c.group == group), key=rank_key)


def group_labels(competitors: List[Competitor]) -> List[str]:
    return sorted({c.group for c in competitors if c.group})


def qualifiers(competitors: List[Competitor], settings: Optional[Dict] = None) -> List[Competitor]:
    """
    Qualified competitors in seed order.

    The top of each group table qualifies (two per group by default); the
    qualifiers are then re-ranked together and list position is the seed.
    """
    per_group = (settings or DEFAULT_SETTINGS)['qualifiers_per_group']
    qualified = []
    for group in group_labels(competitors):
        qualified.extend(group_table(competitors, group)[:per_group])
    return sorted(qualified, key=rank_key)
