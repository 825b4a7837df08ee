# src/atlas_deploy/core/__init__.py
"""
Core do Atlas Deploy.

Este pacote reúne a implementação canônica do motor de resolução de
overrides e da derivação de argumentos de build.

O core é projetado para ser:
    - determinístico
    - puro (sem I/O nas operações centrais)
    - seguro para chamadas concorrentes sobre a mesma base
    - orientado a tipos explícitos

Componentes principais:
    - manifest     → modelo tri-state, construtores, resolução de overlays
    - build        → BuildArguments e planejamento de comandos
    - render       → serialização do manifest resolvido
    - config       → settings do próprio Atlas Deploy
    - pipeline     → fluxo resolve → derive
    - traceability → Event Log

Limites explícitos:
    - Não depende de CLI, prompts ou serviços externos
    - Não realiza retry de nenhuma operação

Este pacote existe como a fonte de verdade operacional do Atlas Deploy.
"""
