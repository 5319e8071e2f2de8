"""Seance Tracker: workout sessions, goals and training statistics."""

__version__ = "0.1.0"
