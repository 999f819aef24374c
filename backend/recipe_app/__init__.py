"""Recipe discovery and pantry management backend."""

__version__ = "1.0.0"
