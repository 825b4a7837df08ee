# src/atlas_deploy/core/render/__init__.py
"""Renderização de manifests em documentos YAML."""
