"""API route modules."""

from . import auth, goals, seances, statistics

__all__ = ["auth", "goals", "seances", "statistics"]
