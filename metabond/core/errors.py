"""
Exception types for the rewards engine.

RewardsError subclasses are validation failures: the call is rejected and no
state changes. The remaining types signal storage or integrity problems.
"""


class RewardsError(Exception):
    """Base class for rejected reward commands and queries."""
    pass


class InvalidCheckpointOrderError(RewardsError):
    """Raised when a checkpoint week is not the next week or lies in the future."""
    pass


class CheckpointOutOfRangeError(RewardsError):
    """Raised when a checkpoint lookup falls outside 1..length()."""
    pass


class WeekNotCheckpointedError(RewardsError):
    """Raised when rewards are queried for a week without a checkpoint."""
    pass


class AlreadyDepositedError(RewardsError):
    """Raised when a project's reward pool has already been funded."""
    pass


class UnknownProjectError(RewardsError):
    """Raised when the registry has no project with the given id."""
    pass


class TokenMismatchError(RewardsError):
    """Raised when a deposit is paid in a token other than the project's reward token."""
    pass


class AmountMismatchError(RewardsError):
    """Raised when a deposit does not equal the project's total reward supply."""
    pass


class InvalidTransitionError(Exception):
    """Raised when event handler is not registered or transition is invalid."""
    pass


class IntegrityError(Exception):
    """Raised when hash chain or signature verification fails."""
    pass


class EventStoreError(Exception):
    """Raised when event store operations fail."""
    pass
