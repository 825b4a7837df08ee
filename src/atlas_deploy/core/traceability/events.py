# src/atlas_deploy/core/traceability/events.py
"""
Event Log estruturado do Atlas Deploy.

Este módulo define o `EventLog`, a estrutura canônica utilizada para
registrar eventos explícitos durante a resolução de overlays, a derivação
de argumentos de build e a preparação de um build.

O Atlas Deploy não utiliza o módulo `logging` no core: todo evento é um
dicionário estruturado, anexado em ordem a uma lista pertencente ao
chamador. Isso mantém as operações centrais puras em relação a estado
global e torna os eventos inspecionáveis em testes.

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - A ordem da lista reflete a ordem real de emissão
    - Cada chamada (ou thread) possui seu próprio EventLog

Invariantes:
    - Todo evento possui `level`, `event`, `message` e `timestamp` (UTC, ISO 8601)
    - Campos extras são preservados sem transformação

Limites explícitos:
    - Não persiste eventos automaticamente
    - Não filtra eventos por nível
    - Não é compartilhado entre chamadas concorrentes

Este módulo existe para garantir rastreabilidade
sem introduzir efeitos colaterais globais.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class EventLog:
    """
    Lista ordenada de eventos estruturados.

    Campos:
        - source: identificador opcional de quem produziu os eventos
          (ex.: nome do workload); copiado em todo evento quando presente
        - events: eventos registrados, em ordem de emissão
    """

    source: Optional[str] = None
    events: List[Dict[str, Any]] = field(default_factory=list)

    def log(self, *, event: str, message: str, level: str = "INFO", **extra: Any) -> None:
        entry: Dict[str, Any] = {
            "level": level,
            "event": event,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if self.source is not None:
            entry["source"] = self.source
        entry.update(extra)
        self.events.append(entry)

    def info(self, event: str, message: str, **extra: Any) -> None:
        self.log(event=event, message=message, level="INFO", **extra)

    def warning(self, event: str, message: str, **extra: Any) -> None:
        self.log(event=event, message=message, level="WARNING", **extra)

    def error(self, event: str, message: str, **extra: Any) -> None:
        self.log(event=event, message=message, level="ERROR", **extra)

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["event"] == event]
