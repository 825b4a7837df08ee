# src/atlas_deploy/core/build/derive.py
"""
Derivação de argumentos de build a partir da configuração resolvida.

Este módulo projeta um `ServiceConfig` resolvido no registro
`BuildArguments`, consumido por quem invoca a ferramenta de build.

Política de derivação (v1):
    - builder presente (não vazio) → modo buildpack; Dockerfile não é exigido;
      o contexto é a raiz do workspace, salvo `build.context` explícito
    - caso contrário → modo Dockerfile; `build.dockerfile` é obrigatório;
      o contexto é o diretório do Dockerfile, salvo `build.context` explícito
    - caminhos relativos são resolvidos contra a raiz do workspace
    - build args e variáveis de ambiente são sempre projetados em ordem
      lexicográfica de chave

Decisões arquiteturais:
    - Nenhum default é substituído aqui: a ausência de um campo exigido é
      erro de programação do chamador (`DerivationPreconditionError`)
    - `BuildArguments` é imutável; seus mapas são cópias independentes

Limites explícitos:
    - Não executa processos (ver `core.build.commands` para o planejamento)
    - Não resolve overlays (recebe a configuração já resolvida)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..exceptions import DerivationPreconditionError
from ..manifest.model import ServiceConfig
from ..manifest.optional import lookup, value_or
from ..traceability.events import EventLog


class BuildMode(str, Enum):
    DOCKERFILE = "dockerfile"
    BUILDPACK = "buildpack"


def sorted_pairs(values: Mapping[str, str]) -> List[str]:
    """Projeta um mapa em `KEY=VALUE`, ordenado por chave."""
    return [f"{key}={values[key]}" for key in sorted(values)]


@dataclass(frozen=True)
class BuildArguments:
    """
    Parâmetros de build consumidos pelo invocador externo.

    Campos:
        - uri: repositório de imagens (registry) usado no nome da imagem
        - image_tag: tag principal da imagem (ex.: commit curto)
        - dockerfile: caminho do Dockerfile (vazio no modo buildpack)
        - context: diretório de contexto do build
        - args: build args (equivalentes às diretivas ARG)
        - additional_tags: tags extras, em ordem
        - builder: builder de buildpacks (vazio no modo Dockerfile)
        - env: variáveis de ambiente do build (modo buildpack)
    """

    uri: str
    image_tag: str
    dockerfile: str
    context: str
    args: Dict[str, str] = field(default_factory=dict)
    additional_tags: Tuple[str, ...] = ()
    builder: str = ""
    env: Dict[str, str] = field(default_factory=dict)

    @property
    def mode(self) -> BuildMode:
        return BuildMode.BUILDPACK if self.builder else BuildMode.DOCKERFILE

    def build_arg_pairs(self) -> List[str]:
        return sorted_pairs(self.args)

    def env_pairs(self) -> List[str]:
        return sorted_pairs(self.env)

    def tags(self) -> Tuple[str, ...]:
        """Tags adicionais seguidas da tag principal."""
        return tuple(self.additional_tags) + (self.image_tag,)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "uri": self.uri,
            "image_tag": self.image_tag,
            "dockerfile": self.dockerfile,
            "context": self.context,
            "args": self.build_arg_pairs(),
            "additional_tags": list(self.additional_tags),
            "builder": self.builder,
            "env": self.env_pairs(),
        }


def _missing(field_path: str, message: str) -> DerivationPreconditionError:
    return DerivationPreconditionError(
        message=f"{field_path}: {message}",
        details={"field_path": field_path},
        hint="Resolva a configuração (base + overlay) com o campo preenchido antes de derivar.",
    )


def derive(
    resolved: ServiceConfig,
    workspace_root: Union[str, Path],
    *,
    uri: str = "",
    image_tag: str = "",
    additional_tags: Iterable[str] = (),
    events: Optional[EventLog] = None,
) -> BuildArguments:
    """
    Deriva `BuildArguments` de uma configuração resolvida.

    Args:
        resolved (ServiceConfig): Configuração já resolvida para um ambiente.
        workspace_root (Union[str, Path]): Raiz do workspace.
        uri (str): Repositório de imagens.
        image_tag (str): Tag principal.
        additional_tags (Iterable[str]): Tags extras, em ordem.
        events (Optional[EventLog]): Event Log opcional do chamador.

    Returns:
        BuildArguments: Registro imutável de argumentos de build.

    Raises:
        DerivationPreconditionError: Se a configuração não for um
            `ServiceConfig` ou se o Dockerfile faltar no modo Dockerfile.
    """
    if not isinstance(resolved, ServiceConfig):
        raise _missing("<root>", f"ServiceConfig esperado, recebido {type(resolved).__name__}")

    root = Path(workspace_root)
    build = resolved.image.build

    builder, _ = lookup(build.builder)
    context, has_context = lookup(build.context)
    has_context = has_context and bool(context)

    if builder:
        dockerfile_path = ""
        context_dir = root / context if has_context else root
    else:
        dockerfile, _ = lookup(build.dockerfile)
        if not dockerfile:
            raise _missing(
                "image.build.dockerfile",
                "Dockerfile obrigatório quando nenhum builder está definido",
            )
        dockerfile_path = str(root / dockerfile)
        context_dir = root / context if has_context else (root / dockerfile).parent
        builder = ""

    args = BuildArguments(
        uri=uri,
        image_tag=image_tag,
        dockerfile=dockerfile_path,
        context=str(context_dir),
        args=dict(value_or(build.args, {})),
        additional_tags=tuple(additional_tags),
        builder=builder,
        env=dict(value_or(build.env, {})),
    )

    if events is not None:
        events.info(
            "build.derived",
            f"Argumentos de build derivados (modo {args.mode.value})",
            mode=args.mode.value,
            context=args.context,
        )
    return args
