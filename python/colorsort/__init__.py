"""Colour-sort puzzle core: pour rules, BFS solver, level generation and QA."""

__version__ = "0.1.0"
