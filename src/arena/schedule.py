import logging
import time
from itertools import combinations
from typing import List, Optional

from .models import ACTIVE, GROUP, Competitor, Match

logger = logging.getLogger(__name__)


def generate_schedule(competitors: List[Competitor], stamp: Optional[int] = None) -> List[Match]:
    """
    Generate the full round robin for every group.

    Only active competitors with a group take part. Match ids combine the
    group, the pair's positions within it and a millisecond creation stamp,
    so a regenerated schedule never reuses an id.
    """
    if stamp is None:
        stamp = int(time.time() * 1000)

    groups = {}
    for competitor in competitors:
        if competitor.status != ACTIVE or not competitor.group:
            continue
        if competitor.group not in groups:
            groups[competitor.group] = []
        groups[competitor.group].append(competitor.id)

    matches = []
    for group_name, member_ids in groups.items():
        if len(member_ids) < 2:
            logger.warning(f'Group {group_name} has fewer than 2 active competitors ({len(member_ids)}). '
                           f'Skipping match generation.')
            continue
        for (i, first), (j, second) in combinations(enumerate(member_ids), 2):
            matches.append(Match(
                match_id=f"g_{group_name}_{i}_{j}_{stamp}",
                kind=GROUP,
                group=group_name,
                slot1=first,
                slot2=second,
            ))

    logger.debug(f'Generated {len(matches)} group matches across {len(groups)} groups')
    return matches
