"""Terminal-facing helpers for the click entry points."""
