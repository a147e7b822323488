"""Single-user kanban board for tracking job-application opportunities."""

__version__ = "0.1.0"
