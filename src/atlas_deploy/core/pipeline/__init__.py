# src/atlas_deploy/core/pipeline/__init__.py
"""Orquestração resolve → derive com rastreabilidade."""
