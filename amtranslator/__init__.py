"""Alertmanager to VictorOps REST translator."""

__version__ = "0.1.0"
