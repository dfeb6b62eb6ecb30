"""Single-user task list manager with local JSON persistence."""

__version__ = "0.1.0"
