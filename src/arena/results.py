"""
Reporting and invalidating match results.

Match lifecycle:
    pending     -> finished     (result reported)
    finished    -> invalidated  (result withdrawn for correction)
    invalidated -> finished     (result reported again)

Reporting a playoff result rewrites every placeholder that points at the
match ('TBD_<id>_WIN' / 'TBD_<id>_LOS') into the concrete competitor.
This is one pass over the playoff list; later rounds resolve when their own
upstream matches are reported.

Invalidation only resets the match itself. Downstream slots that were
already filled from it keep the old competitor.
"""
import logging
from typing import List, Optional, Tuple

from .models import FINISHED, INVALIDATED, PENDING, PLAYOFF, Match
from .placeholders import BYE, is_concrete, is_placeholder, loser_of, winner_of

logger = logging.getLogger(__name__)


def _find(matches: List[Match], match_id: str) -> Optional[Match]:
    return next((m for m in matches if m.match_id == match_id), None)


def decide(match: Match, score1: int, score2: int) -> Tuple[Optional[str], Optional[str]]:
    """Return (winner, loser) for a score; both None on a tie."""
    if score1 > score2:
        return match.slot1, match.slot2
    elif score2 > score1:
        return match.slot2, match.slot1
    return None, None


def propagate(matches: List[Match], match_id: str, winner_id: Optional[str], loser_id: Optional[str]) -> List[Match]:
    """Replace placeholders for match_id's winner and loser in every match."""
    if not winner_id:
        return list(matches)

    win_ref = winner_of(match_id)
    los_ref = loser_of(match_id)
    substitutions = {win_ref: winner_id}
    if loser_id:
        substitutions[los_ref] = loser_id

    updated = []
    for match in matches:
        slot1 = substitutions.get(match.slot1, match.slot1)
        slot2 = substitutions.get(match.slot2, match.slot2)
        if (slot1, slot2) != match.slots:
            logger.debug(f'{match.match_id}: resolved slots to ({slot1}, {slot2})')
            match = match.replace(slot1=slot1, slot2=slot2)
        updated.append(match)
    return updated


def report_result(matches: List[Match], match_id: str, score1: int, score2: int) -> List[Match]:
    """
    Record a score and mark the match finished.

    The higher score wins; a tie finishes the match without a winner. For a
    playoff match the winner and loser are pushed into dependent matches.
    An unknown match_id returns the list unchanged.
    """
    match = _find(matches, match_id)
    if match is None:
        logger.warning(f'Ignoring result for unknown match {match_id}')
        return list(matches)

    winner_id, loser_id = decide(match, score1, score2)
    finished = match.replace(score1=score1, score2=score2, winner_id=winner_id, status=FINISHED)
    updated = [finished if m.match_id == match_id else m for m in matches]

    logger.info(f'Result {match_id}: {score1}-{score2}, winner {winner_id or "none (tie)"}')

    if match.kind == PLAYOFF:
        updated = propagate(updated, match_id, winner_id, loser_id)
    return updated


def invalidate_result(matches: List[Match], match_id: str) -> List[Match]:
    """Reset a match to 0-0 with no winner and status invalidated."""
    if _find(matches, match_id) is None:
        logger.warning(f'Ignoring invalidation of unknown match {match_id}')
        return list(matches)

    logger.info(f'Invalidated result of {match_id}')
    return [
        m.replace(score1=0, score2=0, winner_id=None, status=INVALIDATED) if m.match_id == match_id else m
        for m in matches
    ]


def _walkover_winner(match: Match) -> Optional[str]:
    if match.status != PENDING or match.kind != PLAYOFF:
        return None
    if match.slot2 == BYE and is_concrete(match.slot1):
        return match.slot1
    if match.slot1 == BYE and is_concrete(match.slot2):
        return match.slot2
    return None


def advance_byes(matches: List[Match]) -> List[Match]:
    """
    Finish pending playoff matches that face a BYE once their other slot is
    known, advancing that competitor. Repeats until nothing changes.
    """
    updated = list(matches)
    while True:
        match = next((m for m in updated if _walkover_winner(m)), None)
        if match is None:
            return updated
        winner_id = _walkover_winner(match)
        logger.info(f'{match.match_id}: {winner_id} advances by walkover')
        updated = [
            m.replace(winner_id=winner_id, status=FINISHED) if m.match_id == match.match_id else m
            for m in updated
        ]
        updated = propagate(updated, match.match_id, winner_id, None)


def playable_matches(matches: List[Match]) -> List[Match]:
    """Unfinished matches that wait on no other match and name at least one competitor."""
    return [
        m for m in matches
        if m.status != FINISHED
        and not (is_placeholder(m.slot1) or is_placeholder(m.slot2))
        and (is_concrete(m.slot1) or is_concrete(m.slot2))
    ]
