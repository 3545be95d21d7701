"""Common crewrota-specific exceptions."""


class CrewRotaValueError(ValueError):
    """Raised when crewrota detects invalid user-provided data."""


class UnknownSolverError(KeyError):
    """Raised when a phase solver name is not registered."""


class UnknownPolicyError(KeyError):
    """Raised when a regime policy identifier is not recognised."""


class SolveCancelledError(RuntimeError):
    """Raised when an offset search is cancelled through its cancel token."""


__all__ = [
    "CrewRotaValueError",
    "UnknownSolverError",
    "UnknownPolicyError",
    "SolveCancelledError",
]
