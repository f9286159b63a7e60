"""
Participant slots.

A slot is stored as a plain string so matches serialize as-is:
- a competitor id
- 'BYE' for a walkover slot
- 'TBD_<match_id>_WIN' / 'TBD_<match_id>_LOS' for the winner or loser of
  another match, resolved once that match is finished
"""
from typing import Dict, Iterable, Optional

BYE = 'BYE'
WIN = 'WIN'
LOS = 'LOS'

_PREFIX = 'TBD_'


class Concrete:
    def __init__(self, competitor_id):
        self.competitor_id = competitor_id

    def __eq__(self, other):
        return isinstance(other, Concrete) and other.competitor_id == self.competitor_id

    def __repr__(self):
        return f"Concrete({self.competitor_id})"


class Bye:
    def __eq__(self, other):
        return isinstance(other, Bye)

    def __repr__(self):
        return "Bye()"


class PendingOn:
    def __init__(self, match_id, outcome):
        self.match_id = match_id
        self.outcome = outcome

    def __eq__(self, other):
        return (isinstance(other, PendingOn)
                and other.match_id == self.match_id
                and other.outcome == self.outcome)

    def __repr__(self):
        return f"PendingOn({self.match_id}, {self.outcome})"


def winner_of(match_id: str) -> str:
    return f"{_PREFIX}{match_id}_{WIN}"


def loser_of(match_id: str) -> str:
    return f"{_PREFIX}{match_id}_{LOS}"


def parse_slot(value: str):
    """Turn a stored slot string into Concrete, Bye or PendingOn."""
    if value == BYE:
        return Bye()
    if value.startswith(_PREFIX):
        body, _, outcome = value[len(_PREFIX):].rpartition('_')
        if body and outcome in (WIN, LOS):
            return PendingOn(body, outcome)
    return Concrete(value)


def is_placeholder(value: str) -> bool:
    return isinstance(parse_slot(value), PendingOn)


def is_concrete(value: str) -> bool:
    return isinstance(parse_slot(value), Concrete)


def referenced_matches(values: Iterable[str]) -> set:
    """Match ids referenced by any placeholder among the given slots."""
    refs = set()
    for value in values:
        slot = parse_slot(value)
        if isinstance(slot, PendingOn):
            refs.add(slot.match_id)
    return refs


def describe_slot(value: str, names: Optional[Dict[str, str]] = None) -> str:
    """
    Human-readable label for a slot.

    Args:
        value: Stored slot string.
        names: Optional competitor id -> display name mapping.
    """
    slot = parse_slot(value)
    if isinstance(slot, Bye):
        return 'Advances (BYE)'
    if isinstance(slot, PendingOn):
        prefix = 'Winner' if slot.outcome == WIN else 'Loser'
        return f"{prefix} {slot.match_id}"
    if names is None:
        return value
    return names.get(value, 'Unknown')
