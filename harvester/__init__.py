"""Cloud resource inventory harvester."""

__version__ = "0.1.0"
