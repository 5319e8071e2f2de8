"""HTTP API for the Seance Tracker."""
