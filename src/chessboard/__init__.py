"""Chessboard: a rules engine for an interactive chessboard."""

__version__ = "0.1.0"
