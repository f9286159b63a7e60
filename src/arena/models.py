from typing import Dict, List, Optional

from .config import DEFAULT_SETTINGS

ACTIVE = 'active'
STANDBY = 'standby'

GROUP = 'group'
PLAYOFF = 'playoff'

PENDING = 'pending'
FINISHED = 'finished'
INVALIDATED = 'invalidated'

UPPER = 'upper'
LOWER = 'lower'
FINAL = 'final'
GRAND_FINAL = 'grand_final'

BRANCHES = (UPPER, LOWER, FINAL, GRAND_FINAL)


def tier_for_rating(rating, thresholds: Optional[List] = None) -> str:
    """Return the tier label whose band contains the rating."""
    if thresholds is None:
        thresholds = DEFAULT_SETTINGS['tier_thresholds']
    tier = thresholds[0][0]
    for name, min_rating in thresholds:
        if rating >= min_rating:
            tier = name
        else:
            break
    return tier


class Competitor:
    def __init__(self, id, name, rating, tier=None, external_id=None, registered_at=None,
                 group=None, status=ACTIVE, points=0, wins=0, losses=0):
        self.id = id
        self.name = name
        self.rating = rating
        self.tier = tier if tier is not None else tier_for_rating(rating)
        self.external_id = external_id
        self.registered_at = registered_at
        self.group = group
        self.status = status
        self.points = points
        self.wins = wins
        self.losses = losses

    def replace(self, **changes) -> 'Competitor':
        """Return a copy with the given fields changed."""
        data = self.to_dict()
        data.update(changes)
        return Competitor(**data)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'rating': self.rating,
            'tier': self.tier,
            'external_id': self.external_id,
            'registered_at': self.registered_at,
            'group': self.group,
            'status': self.status,
            'points': self.points,
            'wins': self.wins,
            'losses': self.losses,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Competitor':
        return cls(
            id=data['id'],
            name=data['name'],
            rating=data.get('rating', 0),
            tier=data.get('tier'),
            external_id=data.get('external_id'),
            registered_at=data.get('registered_at'),
            group=data.get('group'),
            status=data.get('status', ACTIVE),
            points=data.get('points', 0),
            wins=data.get('wins', 0),
            losses=data.get('losses', 0),
        )

    def __eq__(self, other):
        if not isinstance(other, Competitor):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Competitor(id={self.id}, name={self.name}, rating={self.rating}, "
                f"group={self.group}, status={self.status}, points={self.points}, "
                f"wins={self.wins}, losses={self.losses})")


class Match:
    """
    A group or playoff match.

    Slots hold a competitor id, the BYE sentinel or a placeholder string
    (see placeholders.py). winner_id is only set on a finished match.
    """

    def __init__(self, match_id, kind, slot1, slot2, group=None, branch=None, phase=None,
                 score1=0, score2=0, winner_id=None, status=PENDING):
        self.match_id = match_id
        self.kind = kind
        self.group = group
        self.branch = branch
        self.phase = phase
        self.slot1 = slot1
        self.slot2 = slot2
        self.score1 = score1
        self.score2 = score2
        self.winner_id = winner_id
        self.status = status

    @property
    def slots(self):
        return (self.slot1, self.slot2)

    def involves(self, competitor_id) -> bool:
        return competitor_id in (self.slot1, self.slot2)

    def replace(self, **changes) -> 'Match':
        """Return a copy with the given fields changed."""
        data = self.to_dict()
        data.update(changes)
        return Match(**data)

    def to_dict(self) -> Dict:
        return {
            'match_id': self.match_id,
            'kind': self.kind,
            'group': self.group,
            'branch': self.branch,
            'phase': self.phase,
            'slot1': self.slot1,
            'slot2': self.slot2,
            'score1': self.score1,
            'score2': self.score2,
            'winner_id': self.winner_id,
            'status': self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Match':
        return cls(
            match_id=data['match_id'],
            kind=data['kind'],
            slot1=data['slot1'],
            slot2=data['slot2'],
            group=data.get('group'),
            branch=data.get('branch'),
            phase=data.get('phase'),
            score1=data.get('score1', 0),
            score2=data.get('score2', 0),
            winner_id=data.get('winner_id'),
            status=data.get('status', PENDING),
        )

    def __eq__(self, other):
        if not isinstance(other, Match):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Match(match_id={self.match_id}, kind={self.kind}, slots=({self.slot1}, {self.slot2}), "
                f"score={self.score1}-{self.score2}, winner_id={self.winner_id}, status={self.status})")
