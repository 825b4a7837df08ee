# src/atlas_deploy/core/config/__init__.py

"""
Camada de configuração do Atlas Deploy.

Este pacote contém os utilitários responsáveis por ler documentos,
mesclar settings e identificar configurações por hash.

Responsabilidades do pacote:
    - Leitura de documentos YAML/JSON com validação do tipo raiz
    - Resolução dos settings (defaults embutidos + overrides locais)
    - Deep-merge determinístico de dicionários
    - Hash canônico para rastreabilidade

Limites explícitos:
    - Não resolve overlays de manifest (ver `core.manifest.resolve`)
    - Não valida semântica de workloads
"""
