"""stigmergence: deterministic multi-population physarum simulation."""

__version__ = "0.1.0"
