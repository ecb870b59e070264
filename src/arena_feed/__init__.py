"""Live trading feed reconciliation for the arena dashboard."""

__version__ = "0.1.0"
