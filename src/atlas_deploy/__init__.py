# src/atlas_deploy/__init__.py
"""
Atlas Deploy — descrição declarativa de workloads conteinerizados.

Este pacote raiz define o namespace público do Atlas Deploy, um núcleo
projetado para descrever um workload uma única vez (configuração base)
e derivar, de forma determinística, a configuração efetiva de cada
ambiente de deploy a partir de overlays explícitos.

Princípios centrais:
    - A configuração base é construída uma vez e nunca é mutada
    - Overlays são deltas explícitos, campo a campo
    - Resolução e derivação são puras e reprodutíveis
    - Rastreabilidade é um requisito de primeira classe

Arquitetura em alto nível:
    - core.config       → settings, merge de dicts e hashing
    - core.manifest     → modelo tri-state, validação, construtores e resolução
    - core.build        → derivação de argumentos de build e planejamento de comandos
    - core.render       → renderização do manifest em documento YAML
    - core.pipeline     → orquestração resolve → derive com rastreabilidade
    - core.traceability → Event Log estruturado

Limites explícitos:
    - Não executa processos de build
    - Não chama APIs de orquestração ou de registry
    - Não faz prompts interativos nem parsing de flags

Este módulo existe para estabelecer o namespace público do Atlas Deploy.
"""

__version__ = "0.1.0"
