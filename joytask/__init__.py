"""JoyTask daily login rewards service."""

__version__ = "1.0.0"
