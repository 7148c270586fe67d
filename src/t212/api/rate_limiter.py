import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from .endpoints import RateLimit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """
    Resultado de uma consulta ao rate limiter.

    Attributes:
        allowed (bool): True se a requisição pode seguir imediatamente.
        wait_seconds (float): Tempo até a requisição mais antiga sair da janela (0 se permitido).
    """
    allowed: bool
    wait_seconds: float = 0.0


class RateLimiter:
    """
    Rate limiter de janela deslizante, com um log de timestamps por endpoint.

    Timestamps mais antigos que a janela são descartados a cada consulta.
    Quando a consulta é negada nenhum estado é alterado, então pode ser
    repetida quantas vezes for necessário.
    """

    def __init__(
        self,
        rate_limits: dict[str, RateLimit] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            rate_limits (dict[str, RateLimit] | None): Limites por chave de endpoint.
            clock (Callable[[], float]): Relógio monotônico em segundos.
        """
        self.rate_limits: dict[str, RateLimit] = dict(rate_limits or {})
        self._clock = clock
        self._request_logs: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        logger.debug("RateLimiter inicializado com %d endpoints limitados", len(self.rate_limits))

    def rate_limit_for(self, endpoint_key: str | None) -> RateLimit | None:
        """Retorna o limite configurado para o endpoint, se houver."""
        if endpoint_key is None:
            return None
        return self.rate_limits.get(endpoint_key)

    def set_rate_limit(self, endpoint_key: str, rate_limit: RateLimit | None) -> None:
        """
        Define (ou remove, com None) o limite de um endpoint.

        O log de timestamps existente é mantido.
        """
        with self._lock:
            if rate_limit is None:
                self.rate_limits.pop(endpoint_key, None)
            else:
                self.rate_limits[endpoint_key] = rate_limit

    def _purge(self, timestamps: deque[float], window_seconds: float, now: float) -> None:
        while timestamps and now - timestamps[0] >= window_seconds:
            timestamps.popleft()

    def can_proceed(self, endpoint_key: str) -> RateLimitDecision:
        """
        Verifica se uma requisição ao endpoint pode seguir agora.

        Se permitido, registra o timestamp atual no log do endpoint.

        Args:
            endpoint_key (str): Chave do endpoint.

        Returns:
            RateLimitDecision: Permissão e, se negada, o tempo de espera.
        """
        rate_limit = self.rate_limits.get(endpoint_key)
        if rate_limit is None:
            return RateLimitDecision(allowed=True)

        with self._lock:
            now = self._clock()
            timestamps = self._request_logs.setdefault(endpoint_key, deque())
            self._purge(timestamps, rate_limit.window_seconds, now)

            if len(timestamps) < rate_limit.max_requests:
                timestamps.append(now)
                return RateLimitDecision(allowed=True)

            wait_seconds = rate_limit.window_seconds - (now - timestamps[0])

        logger.debug(
            "Rate limit atingido para %s: %d/%d na janela de %.1fs. Espera de %.3fs.",
            endpoint_key,
            len(timestamps),
            rate_limit.max_requests,
            rate_limit.window_seconds,
            wait_seconds,
        )
        return RateLimitDecision(allowed=False, wait_seconds=wait_seconds)

    def pending(self, endpoint_key: str) -> int:
        """Número de timestamps ainda dentro da janela para o endpoint."""
        rate_limit = self.rate_limits.get(endpoint_key)
        if rate_limit is None:
            return 0
        with self._lock:
            timestamps = self._request_logs.get(endpoint_key)
            if not timestamps:
                return 0
            self._purge(timestamps, rate_limit.window_seconds, self._clock())
            return len(timestamps)

    def reset(self, endpoint_key: str | None = None) -> None:
        """Limpa o log de um endpoint ou de todos."""
        with self._lock:
            if endpoint_key is None:
                self._request_logs.clear()
            else:
                self._request_logs.pop(endpoint_key, None)
