"""PyZorkCore - a Zork-style interactive fiction engine core."""

__version__ = "0.1.0"
