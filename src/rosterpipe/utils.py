"""Utility functions for rosterpipe."""

from pathlib import Path


def get_templates_dir() -> Path:
    """Get the directory holding packaged configuration templates."""
    return Path(__file__).parent / "templates"
