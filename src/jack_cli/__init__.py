"""jack: CLI to operate a Jackadi manager."""

__version__ = "0.1.0"
