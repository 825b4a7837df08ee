# src/atlas_deploy/core/manifest/__init__.py
"""
Manifest de workloads do Atlas Deploy.

Este pacote contém o modelo tipado com campos tri-state, a validação de
valores, os construtores por tipo de workload, o resolver de overlays
por ambiente e a conversão de/para documentos.

Componentes principais:
    - optional  → `Opt` (`UNSET` | `Value`) e políticas de merge por campo
    - model     → dataclasses do manifest
    - validate  → regras de valores (nome, porta, tipo, fonte de build)
    - workloads → construtores com defaults (despacho por `WorkloadType`)
    - resolve   → `resolve` e `apply_env`
    - codec     → dict <-> Manifest
    - loader    → leitura e escrita de manifests em disco

Limites explícitos:
    - Não executa builds nem deploys
"""
