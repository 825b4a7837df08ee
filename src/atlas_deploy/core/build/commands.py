# src/atlas_deploy/core/build/commands.py
"""
Planejamento dos comandos da ferramenta de build.

Este módulo transforma `BuildArguments` em listas de argumentos (argv)
prontas para um invocador externo. Nenhum processo é executado aqui.

Modo buildpack:
    pack build <uri>:latest --builder <builder> [--path <context>] [--env K=V ...]
    docker tag <uri>:latest <uri>:<tag>

Modo Dockerfile:
    docker build -t <uri>:<tag> ... [--build-arg K=V ...] <context> -f <dockerfile>

Invariantes:
    - `--build-arg` e `--env` aparecem ordenados por chave
    - as tags adicionais precedem a tag principal
"""

from __future__ import annotations

from typing import Iterable, List

from .derive import BuildArguments, BuildMode


DOCKER = "docker"
PACK = "pack"
LATEST_TAG = "latest"


def image_name(uri: str, tag: str) -> str:
    return f"{uri}:{tag}"


def build_commands(args: BuildArguments) -> List[List[str]]:
    """Comandos, em ordem, que constroem e etiquetam a imagem."""
    if args.mode is BuildMode.BUILDPACK:
        pack = [PACK, "build", image_name(args.uri, LATEST_TAG), "--builder", args.builder]
        if args.context:
            pack += ["--path", args.context]
        for pair in args.env_pairs():
            pack += ["--env", pair]
        tag = [
            DOCKER,
            "tag",
            image_name(args.uri, LATEST_TAG),
            image_name(args.uri, args.image_tag),
        ]
        return [pack, tag]

    docker = [DOCKER, "build"]
    for tag in args.tags():
        docker += ["-t", image_name(args.uri, tag)]
    for pair in args.build_arg_pairs():
        docker += ["--build-arg", pair]
    docker += [args.context, "-f", args.dockerfile]
    return [docker]


def push_commands(uri: str, image_tag: str, additional_tags: Iterable[str] = ()) -> List[List[str]]:
    return [
        [DOCKER, "push", image_name(uri, tag)]
        for tag in list(additional_tags) + [image_tag]
    ]


def login_command(uri: str, username: str) -> List[str]:
    """Login no registry; a senha é enviada pelo stdin pelo invocador."""
    return [DOCKER, "login", "-u", username, "--password-stdin", uri]
