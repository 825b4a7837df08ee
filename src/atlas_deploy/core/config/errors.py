# src/atlas_deploy/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Atlas Deploy.

Este módulo define a hierarquia oficial de exceções utilizadas durante
a leitura de documentos (settings e manifests em disco), a validação
estrutural do tipo raiz e o deep-merge de settings.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais são tratados como falhas fatais
    - Falhas de I/O continuam reconhecíveis como `OSError`

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não representa erros do resolver de overlays (ver `core.exceptions`)
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do Atlas Deploy.

    Todas as exceções levantadas durante leitura de documentos, validação
    estrutural e merge de settings herdam desta classe.
    """


class DocumentNotFoundError(ConfigError, FileNotFoundError):
    """
    Exceção levantada quando um documento obrigatório não existe no caminho
    especificado.

    Decisões arquiteturais:
        - Também é um `FileNotFoundError`: a falha de I/O é propagada sem
          perder sua classificação original
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando a extensão do documento não é suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz do documento não é um
    dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge
    de settings.

    Exemplo de conflito:
        - base:     {"manifest": {"cpu": 256}}
        - override: {"manifest": "small"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
        - A mensagem aponta o caminho completo da chave (ex.: `manifest.cpu`)
    """
