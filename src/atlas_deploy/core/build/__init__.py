# src/atlas_deploy/core/build/__init__.py
"""
Derivação de argumentos de build.

Projeta uma configuração resolvida em `BuildArguments` e planeja (sem
executar) os comandos da ferramenta de build.
"""
