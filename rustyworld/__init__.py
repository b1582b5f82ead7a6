"""Interpreter for the 'Another World' game data: resource loading, bytecode VM and polygon video."""

__version__ = "0.1.0"