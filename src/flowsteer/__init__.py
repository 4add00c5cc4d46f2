"""Velocity-obstacle steering core for flow-field driven crowds."""

__version__ = "0.1.0"
