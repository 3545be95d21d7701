"""Core utilities shared across crewrota modules."""

from .errors import CrewRotaValueError, SolveCancelledError, UnknownPolicyError, UnknownSolverError

__all__ = ["CrewRotaValueError", "SolveCancelledError", "UnknownPolicyError", "UnknownSolverError"]
