"""
Double elimination playoff generation.

In double elimination:
- Competitors must lose twice to be eliminated
- Upper bracket: competitors that haven't lost yet
- Lower bracket: competitors that have lost once
- Grand Final: upper bracket champion vs lower bracket champion

Brackets use fixed layouts for 6, 8 and 10 qualifiers (two per group for
3, 4 and 5 groups). Each layout is a table of
(match_id, branch, phase, slot1, slot2) rows where an int slot is a seed
(0-indexed position in the qualifier ranking) and a str slot is a
placeholder or BYE, copied as-is.
"""
import logging
from typing import Dict, List, Optional

from .errors import BracketSizeError
from .models import FINAL, FINISHED, GRAND_FINAL, LOWER, PLAYOFF, UPPER, Competitor, Match
from .placeholders import BYE, describe_slot, loser_of, winner_of
from .standings import qualifiers

logger = logging.getLogger(__name__)

W = winner_of
L = loser_of


_UPPER_SEMIS_AND_FINAL = [
    ('u_sf_1', UPPER, 'Upper SF 1', W('u_qf_1'), W('u_qf_2')),
    ('u_sf_2', UPPER, 'Upper SF 2', W('u_qf_3'), W('u_qf_4')),
    ('u_final', UPPER, 'Upper Final', W('u_sf_1'), W('u_sf_2')),
]

# Upper SF losers drop into the opposite half of the lower bracket.
_LOWER_FROM_FOUR_QUARTERS = [
    ('l_r1_1', LOWER, 'Lower R1 1', L('u_qf_1'), L('u_qf_2')),
    ('l_r1_2', LOWER, 'Lower R1 2', L('u_qf_3'), L('u_qf_4')),
    ('l_r2_1', LOWER, 'Lower R2 1', W('l_r1_1'), L('u_sf_2')),
    ('l_r2_2', LOWER, 'Lower R2 2', W('l_r1_2'), L('u_sf_1')),
    ('l_sf', LOWER, 'Lower SF', W('l_r2_1'), W('l_r2_2')),
    ('l_final', LOWER, 'Lower Final', W('l_sf'), L('u_final')),
]

BRACKET_LAYOUTS = {
    6: [
        ('u_qf_1', UPPER, 'Upper QF 1', 2, 5),
        ('u_qf_2', UPPER, 'Upper QF 2', 3, 4),
        ('u_sf_1', UPPER, 'Upper SF 1', 0, W('u_qf_2')),
        ('u_sf_2', UPPER, 'Upper SF 2', 1, W('u_qf_1')),
        ('u_final', UPPER, 'Upper Final', W('u_sf_1'), W('u_sf_2')),
        ('l_r1', LOWER, 'Lower R1', L('u_qf_1'), L('u_qf_2')),
        ('l_r2_1', LOWER, 'Lower R2 1', W('l_r1'), L('u_sf_2')),
        ('l_r2_2', LOWER, 'Lower R2 2', L('u_sf_1'), BYE),
        ('l_sf', LOWER, 'Lower SF', W('l_r2_1'), W('l_r2_2')),
        ('l_final', LOWER, 'Lower Final', W('l_sf'), L('u_final')),
    ],
    8: [
        ('u_qf_1', UPPER, 'Upper QF 1', 0, 7),
        ('u_qf_2', UPPER, 'Upper QF 2', 3, 4),
        ('u_qf_3', UPPER, 'Upper QF 3', 1, 6),
        ('u_qf_4', UPPER, 'Upper QF 4', 2, 5),
    ] + _UPPER_SEMIS_AND_FINAL + _LOWER_FROM_FOUR_QUARTERS,
    10: [
        ('u_pre_1', UPPER, 'Prelim 1', 6, 9),
        ('u_pre_2', UPPER, 'Prelim 2', 7, 8),
        ('u_qf_1', UPPER, 'Upper QF 1', 0, W('u_pre_1')),
        ('u_qf_2', UPPER, 'Upper QF 2', 3, 4),
        ('u_qf_3', UPPER, 'Upper QF 3', 1, W('u_pre_2')),
        ('u_qf_4', UPPER, 'Upper QF 4', 2, 5),
    ] + _UPPER_SEMIS_AND_FINAL + [
        ('l_pre', LOWER, 'Lower Prelim', L('u_pre_1'), L('u_pre_2')),
    ] + _LOWER_FROM_FOUR_QUARTERS,
}

SUPPORTED_BRACKET_SIZES = tuple(sorted(BRACKET_LAYOUTS))

GRAND_FINAL_ROW = ('grand_final', GRAND_FINAL, 'Grand Final', W('u_final'), W('l_final'))


def _fill_slot(slot, seeded: List[Competitor]) -> str:
    if isinstance(slot, int):
        return seeded[slot].id
    return slot


def build_bracket(seeded: List[Competitor]) -> List[Match]:
    """
    Build the playoff matches for an already seeded qualifier list.

    Raises:
        BracketSizeError: If there is no layout for len(seeded).
    """
    layout = BRACKET_LAYOUTS.get(len(seeded))
    if layout is None:
        raise BracketSizeError(len(seeded), SUPPORTED_BRACKET_SIZES)

    matches = []
    for match_id, branch, phase, slot1, slot2 in layout + [GRAND_FINAL_ROW]:
        matches.append(Match(
            match_id=match_id,
            kind=PLAYOFF,
            branch=branch,
            phase=phase,
            slot1=_fill_slot(slot1, seeded),
            slot2=_fill_slot(slot2, seeded),
        ))
    return matches


def generate_bracket(competitors: List[Competitor], settings: Optional[Dict] = None) -> List[Match]:
    """
    Generate the double elimination playoff from current group standings.

    Args:
        competitors: All competitors with groups and up-to-date standings.
        settings: Optional settings (qualifiers per group).

    Returns:
        Playoff matches: seeded slots hold competitor ids, the rest hold
        placeholders for upstream winners and losers.

    Raises:
        BracketSizeError: If the qualifier count is not 6, 8 or 10.
    """
    seeded = qualifiers(competitors, settings)
    matches = build_bracket(seeded)
    logger.info(f'Generated {len(matches)} playoff matches for {len(seeded)} qualifiers')
    return matches


_ROUND_ORDER = ['Prelim', 'QF', 'R1', 'R2', 'SF', 'Final']


def round_label(phase: str) -> str:
    """'Upper QF 2' -> 'Upper QF'; phases without a match number are kept."""
    head, _, tail = phase.rpartition(' ')
    return head if head and tail.isdigit() else phase


def _round_rank(label: str) -> int:
    if 'Grand Final' in label:
        return len(_ROUND_ORDER)
    for index, marker in enumerate(_ROUND_ORDER):
        if marker in label:
            return index
    return len(_ROUND_ORDER) + 1


def bracket_sections(matches: List[Match]) -> Dict[str, Dict[str, List[Match]]]:
    """
    Group playoff matches into Upper/Lower/Finals sections, each an ordered
    mapping of round label -> matches.
    """
    sections = {
        'Upper Bracket': [m for m in matches if m.branch == UPPER],
        'Lower Bracket': [m for m in matches if m.branch == LOWER],
        'Finals': [m for m in matches if m.branch in (FINAL, GRAND_FINAL)],
    }
    result = {}
    for title, section_matches in sections.items():
        if not section_matches:
            continue
        rounds = {}
        for match in sorted(section_matches, key=lambda m: _round_rank(round_label(m.phase or ''))):
            rounds.setdefault(round_label(match.phase or ''), []).append(match)
        result[title] = rounds
    return result


def champion(matches: List[Match]) -> Optional[str]:
    """Id of the grand final winner, or None while it is undecided."""
    for match in matches:
        if match.branch == GRAND_FINAL and match.status == FINISHED:
            return match.winner_id
    return None


def get_bracket_display(matches: List[Match], competitors: List[Competitor]) -> Dict:
    """Bracket sections with slots rendered as names, ready for a view layer."""
    names = {c.id: c.name for c in competitors}
    display = {}
    for title, rounds in bracket_sections(matches).items():
        display[title] = {
            label: [{
                'match_id': m.match_id,
                'players': (describe_slot(m.slot1, names), describe_slot(m.slot2, names)),
                'score': (m.score1, m.score2),
                'winner': names.get(m.winner_id) if m.winner_id else None,
                'status': m.status,
            } for m in round_matches]
            for label, round_matches in rounds.items()
        }
    winner = champion(matches)
    display['champion'] = names.get(winner) if winner else None
    return display
