import copy
import json
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    Cache em memória com TTL para respostas da API.

    É apenas uma otimização: com ou sem cache o resultado de uma chamada é o
    mesmo, muda só o número de requisições de rede. Entradas expiradas se
    comportam como ausentes.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(endpoint_key: str, path: str, params: dict | None = None) -> str:
        """
        Gera a chave de cache a partir do endpoint, do path e dos parâmetros.

        Os parâmetros são serializados com chaves ordenadas, então a ordem de
        inserção não altera a chave.

        Args:
            endpoint_key (str): Chave do endpoint.
            path (str): Path requisitado (inclui o cursor em páginas seguintes).
            params (dict | None): Parâmetros de query.

        Returns:
            str: Chave canônica.
        """
        serialized = json.dumps(params or {}, sort_keys=True, separators=(",", ":"), default=str)
        return f"t212_{endpoint_key}_{path}_{serialized}"

    def get(self, cache_key: str) -> Any | None:
        """
        Obtém um valor do cache.

        Returns:
            Any | None: Cópia do valor armazenado, ou None se ausente/expirado.
        """
        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                return None

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[cache_key]
                logger.debug("Entrada de cache expirada: %s", cache_key)
                return None

        return copy.deepcopy(value)

    def put(self, cache_key: str, value: Any, ttl_seconds: float) -> None:
        """
        Armazena um valor com tempo de vida.

        Args:
            cache_key (str): Chave canônica.
            value (Any): Valor JSON a armazenar.
            ttl_seconds (float): Tempo de vida; <= 0 não armazena nada.
        """
        if ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[cache_key] = (copy.deepcopy(value), self._clock() + ttl_seconds)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
