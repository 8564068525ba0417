"""RICE prioritization and greedy sprint capacity planning."""

__version__ = "0.1.0"
