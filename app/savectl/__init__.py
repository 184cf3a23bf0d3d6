"""savectl - backup transfer and archival for game save data."""

__version__ = "0.1.0"
