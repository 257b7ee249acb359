"""Contact engagement qualification and agent-routing engine."""

__version__ = "0.1.0"
