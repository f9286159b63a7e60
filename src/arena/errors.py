"""Exceptions raised at the tournament boundary.

The pure match operations never raise for unknown ids; these cover
registration, score validation and out-of-order tournament actions.
"""


class ArenaError(Exception):
    """Base exception for all tournament errors."""

    pass


class DuplicateCompetitorError(ArenaError, ValueError):
    """Raised when a registration reuses an existing external id."""

    def __init__(self, external_id):
        self.external_id = external_id
        super().__init__(f"A competitor with external id '{external_id}' is already registered")


class InvalidScoreError(ArenaError, ValueError):
    """Raised when a reported score is negative, not an integer or above the cap."""

    pass


class BracketSizeError(ArenaError, ValueError):
    """Raised when no bracket topology exists for the qualifier count."""

    def __init__(self, qualifier_count, supported):
        self.qualifier_count = qualifier_count
        self.supported = tuple(supported)
        sizes = ', '.join(str(s) for s in self.supported)
        super().__init__(f"No bracket topology for {qualifier_count} qualifiers (supported: {sizes})")


class TournamentStateError(ArenaError):
    """Raised when an action is not allowed in the current tournament phase."""

    pass


class MatchNotReadyError(TournamentStateError):
    """Raised when a playoff match still waits on an upstream result."""

    pass
