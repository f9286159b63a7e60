"""
Tournament state and the transitions applied to it.

The whole tournament is one TournamentState value. Every transition takes
a state and returns a new one; standings are recomputed over group and
playoff matches together after any match changes. Saving the state
somewhere is up to the caller (to_dict/from_dict give a YAML/JSON-ready
form).
"""
import logging
import random
import time
from datetime import datetime
from typing import Dict, List, Optional

from .config import DEFAULT_SETTINGS
from .double_elimination import champion, generate_bracket
from .errors import DuplicateCompetitorError, InvalidScoreError, MatchNotReadyError, TournamentStateError
from .groups import assign_groups
from .models import ACTIVE, FINISHED, PENDING, STANDBY, Competitor, Match, tier_for_rating
from .placeholders import is_placeholder
from .results import advance_byes, invalidate_result, report_result
from .schedule import generate_schedule
from .standings import compute_standings

logger = logging.getLogger(__name__)


class TournamentState:
    def __init__(self, competitors=None, group_matches=None, playoff_matches=None, started=False):
        self.competitors = list(competitors or [])
        self.group_matches = list(group_matches or [])
        self.playoff_matches = list(playoff_matches or [])
        self.started = started

    def replace(self, **changes) -> 'TournamentState':
        data = {
            'competitors': self.competitors,
            'group_matches': self.group_matches,
            'playoff_matches': self.playoff_matches,
            'started': self.started,
        }
        data.update(changes)
        return TournamentState(**data)

    @property
    def all_matches(self) -> List[Match]:
        return self.group_matches + self.playoff_matches

    def competitor(self, competitor_id) -> Optional[Competitor]:
        return next((c for c in self.competitors if c.id == competitor_id), None)

    def to_dict(self) -> Dict:
        return {
            'competitors': [c.to_dict() for c in self.competitors],
            'group_matches': [m.to_dict() for m in self.group_matches],
            'playoff_matches': [m.to_dict() for m in self.playoff_matches],
            'started': self.started,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'TournamentState':
        data = data or {}
        return cls(
            competitors=[Competitor.from_dict(c) for c in data.get('competitors') or []],
            group_matches=[Match.from_dict(m) for m in data.get('group_matches') or []],
            playoff_matches=[Match.from_dict(m) for m in data.get('playoff_matches') or []],
            started=bool(data.get('started', False)),
        )

    def __eq__(self, other):
        if not isinstance(other, TournamentState):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"TournamentState(competitors={len(self.competitors)}, group_matches={len(self.group_matches)}, "
                f"playoff_matches={len(self.playoff_matches)}, started={self.started})")


def _restandings(state: TournamentState) -> TournamentState:
    return state.replace(competitors=compute_standings(state.competitors, state.all_matches))


def _new_competitor_id(taken) -> str:
    while True:
        candidate = f"player_{int(time.time() * 1000)}_{random.randint(0, 999)}"
        if candidate not in taken:
            return candidate


def register_competitor(state: TournamentState, name: str, external_id: str, rating: int,
                        registered_at: Optional[str] = None, settings: Optional[Dict] = None) -> TournamentState:
    """
    Add a competitor and redraw the groups.

    Raises:
        ValueError: If the name or external id is blank or the rating is negative.
        DuplicateCompetitorError: If external_id is already registered.
    """
    settings = settings or DEFAULT_SETTINGS
    name = (name or '').strip()
    external_id = str(external_id or '').strip()
    if not name or not external_id:
        raise ValueError('Name and external id are required')
    if not isinstance(rating, int) or isinstance(rating, bool) or rating < 0:
        raise ValueError(f'Rating must be a non-negative integer, got {rating!r}')
    if any(str(c.external_id or '') == external_id for c in state.competitors):
        raise DuplicateCompetitorError(external_id)

    competitor = Competitor(
        id=_new_competitor_id({c.id for c in state.competitors}),
        name=name,
        rating=rating,
        tier=tier_for_rating(rating, settings['tier_thresholds']),
        external_id=external_id,
        registered_at=registered_at or datetime.now().isoformat(timespec='seconds'),
    )
    competitors, _ = assign_groups(state.competitors + [competitor], settings)
    logger.info(f'Registered {name} ({external_id}, rating {rating}, {competitor.tier})')
    return state.replace(competitors=competitors)


def remove_competitor(state: TournamentState, competitor_id: str, settings: Optional[Dict] = None) -> TournamentState:
    """Delete a competitor, drop every match they appear in and redraw the groups."""
    if state.competitor(competitor_id) is None:
        logger.warning(f'Ignoring removal of unknown competitor {competitor_id}')
        return state

    remaining = [c for c in state.competitors if c.id != competitor_id]
    competitors, _ = assign_groups(remaining, settings)
    group_matches = [m for m in state.group_matches if not m.involves(competitor_id)]
    playoff_matches = [m for m in state.playoff_matches if not m.involves(competitor_id)]
    logger.info(f'Removed competitor {competitor_id}, dropped '
                f'{len(state.all_matches) - len(group_matches) - len(playoff_matches)} matches')
    return _restandings(state.replace(
        competitors=competitors,
        group_matches=group_matches,
        playoff_matches=playoff_matches,
    ))


def start_tournament(state: TournamentState, settings: Optional[Dict] = None,
                     stamp: Optional[int] = None) -> TournamentState:
    """
    Draw the groups and generate the group stage schedule.

    Raises:
        TournamentStateError: If already started or nobody would be placed in a group.
    """
    if state.started:
        raise TournamentStateError('Tournament has already started')

    competitors, group_count = assign_groups(state.competitors, settings)
    active = sum(1 for c in competitors if c.status == ACTIVE)
    if active == 0:
        raise TournamentStateError(
            f'Need at least {group_count} competitors to start, have {len(competitors)}')

    group_matches = generate_schedule(competitors, stamp)
    logger.info(f'Tournament started: {active} competitors in {group_count} groups, '
                f'{len(group_matches)} group matches')
    return _restandings(state.replace(
        competitors=competitors,
        group_matches=group_matches,
        playoff_matches=[],
        started=True,
    ))


def reset_tournament(state: TournamentState) -> TournamentState:
    """Clear all matches and return every competitor to an unplaced, zeroed record."""
    logger.info('Tournament reset')
    return TournamentState(
        competitors=[c.replace(group=None, status=ACTIVE, points=0, wins=0, losses=0) for c in state.competitors],
        group_matches=[],
        playoff_matches=[],
        started=False,
    )


def validate_score(score, settings: Optional[Dict] = None) -> int:
    max_score = (settings or DEFAULT_SETTINGS)['max_score']
    if not isinstance(score, int) or isinstance(score, bool):
        raise InvalidScoreError(f'Score must be an integer, got {score!r}')
    if score < 0 or score > max_score:
        raise InvalidScoreError(f'Score must be between 0 and {max_score}, got {score}')
    return score


def report_score(state: TournamentState, match_id: str, score1: int, score2: int,
                 settings: Optional[Dict] = None) -> TournamentState:
    """
    Record a result for a group or playoff match and refresh standings.

    Raises:
        InvalidScoreError: If a score is out of range.
        MatchNotReadyError: If a playoff slot is still waiting on another match.
    """
    validate_score(score1, settings)
    validate_score(score2, settings)

    if any(m.match_id == match_id for m in state.group_matches):
        return _restandings(state.replace(
            group_matches=report_result(state.group_matches, match_id, score1, score2)))

    match = next((m for m in state.playoff_matches if m.match_id == match_id), None)
    if match is None:
        logger.warning(f'Ignoring result for unknown match {match_id}')
        return state
    if is_placeholder(match.slot1) or is_placeholder(match.slot2):
        raise MatchNotReadyError(f'Match {match_id} is waiting on ({match.slot1}, {match.slot2})')

    playoff_matches = report_result(state.playoff_matches, match_id, score1, score2)
    return _restandings(state.replace(playoff_matches=advance_byes(playoff_matches)))


def invalidate_match(state: TournamentState, match_id: str) -> TournamentState:
    """Withdraw a result; downstream playoff slots are left as they are."""
    if any(m.match_id == match_id for m in state.group_matches):
        return _restandings(state.replace(group_matches=invalidate_result(state.group_matches, match_id)))
    if any(m.match_id == match_id for m in state.playoff_matches):
        return _restandings(state.replace(playoff_matches=invalidate_result(state.playoff_matches, match_id)))
    logger.warning(f'Ignoring invalidation of unknown match {match_id}')
    return state


def generate_playoffs(state: TournamentState, settings: Optional[Dict] = None) -> TournamentState:
    """
    Build the playoff bracket from the group standings, replacing any
    existing playoff matches.

    Raises:
        TournamentStateError: If the tournament hasn't started or group matches are pending.
        BracketSizeError: If the qualifier count has no bracket layout.
    """
    if not state.started:
        raise TournamentStateError('Tournament has not started')
    pending = [m for m in state.group_matches if m.status == PENDING]
    if pending:
        raise TournamentStateError(f'{len(pending)} group matches are still pending')
    if state.playoff_matches:
        logger.info('Regenerating playoffs, discarding existing playoff matches')

    state = _restandings(state.replace(playoff_matches=[]))
    playoff_matches = advance_byes(generate_bracket(state.competitors, settings))
    return _restandings(state.replace(playoff_matches=playoff_matches))


def tournament_phase(state: TournamentState) -> str:
    """One of: 'registration', 'group_stage', 'playoffs', 'complete'."""
    if not state.started:
        return 'registration'
    if champion(state.playoff_matches):
        return 'complete'
    if state.playoff_matches:
        return 'playoffs'
    return 'group_stage'


def overview(state: TournamentState) -> Dict[str, int]:
    """Headline counts for an admin dashboard."""
    matches = state.all_matches
    return {
        'total': len(state.competitors),
        'active': sum(1 for c in state.competitors if c.status == ACTIVE),
        'standby': sum(1 for c in state.competitors if c.status == STANDBY),
        'matches': len(matches),
        'finished': sum(1 for m in matches if m.status == FINISHED),
    }


def matches_for(state: TournamentState, competitor_id: str) -> List[Match]:
    """Group and playoff matches a competitor is (or was) slotted into."""
    return [m for m in state.all_matches if m.involves(competitor_id)]
