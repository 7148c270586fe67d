"""
Estado de sincronização por recurso: último cursor seguido e horário da última execução.

O estado é apenas registrado; cada sincronização continua buscando o recurso
completo a partir da primeira página.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncState:
    """
    Estado da última sincronização bem-sucedida de um recurso.

    Attributes:
        resource_key (str): Chave do recurso.
        last_cursor (str | None): Último cursor de paginação seguido (None se houve uma única página).
        last_updated (str): Horário da sincronização em ISO 8601 (UTC).
    """
    resource_key: str
    last_cursor: str | None
    last_updated: str


def utc_timestamp() -> str:
    """Horário atual em ISO 8601 (UTC), com precisão de segundos."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class InMemorySyncStateStore:
    """
    Armazenamento de estados de sincronização em memória, por chave de recurso.
    """

    def __init__(self, initial: dict[str, SyncState] | None = None):
        self._states: dict[str, SyncState] = dict(initial or {})

    def get_state(self, resource_key: str) -> SyncState | None:
        return self._states.get(resource_key)

    def store_state(self, state: SyncState) -> None:
        logger.debug("Estado de %s: cursor=%s em %s", state.resource_key, state.last_cursor, state.last_updated)
        self._states[state.resource_key] = state
