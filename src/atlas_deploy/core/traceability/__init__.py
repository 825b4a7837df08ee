# src/atlas_deploy/core/traceability/__init__.py
"""Rastreabilidade do Atlas Deploy (Event Log estruturado)."""

from .events import EventLog

__all__ = ["EventLog"]
