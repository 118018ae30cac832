"""Styling and chrome shared by every view."""
