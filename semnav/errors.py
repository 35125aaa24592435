"""Exceptions raised by the address registry, relation index and pathfinder."""


class SemnavError(Exception):
    """Base class for all semnav errors."""


class InvalidAddress(SemnavError, ValueError):
    """Raised when an input matches neither the canonical nor the short address grammar."""

    def __init__(self, value: str, reason: str = "") -> None:
        self.value = value
        self.reason = reason
        message = f"Invalid address: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class RegistryExhausted(SemnavError):
    """Raised when no free slug is found within the collision probe bound."""

    def __init__(self, address: str, attempts: int) -> None:
        self.address = address
        self.attempts = attempts
        super().__init__(f"Cannot resolve collision for {address} after {attempts} attempts")


class InvalidLimit(SemnavError, ValueError):
    """Raised when a query bound is not a strictly positive integer."""

    def __init__(self, limit: object) -> None:
        self.limit = limit
        super().__init__(f"Limit must be a strictly positive integer, got {limit!r}")


class PathfindingDegraded(SemnavError):
    """Internal failure of a pathfinding stage. Never propagated to callers."""

    def __init__(self, stage: str, cause: Exception) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"Pathfinding failed during {stage}: {cause}")
