import logging
import random
from dataclasses import dataclass

from .rate_limiter import RateLimiter
from .transport import RETRYABLE_TRANSPORT_KINDS

logger = logging.getLogger(__name__)

# Status HTTP que passam por retry (além de qualquer 5xx)
RATE_LIMIT_STATUS = 429
RETRYABLE_SERVER_STATUSES = (500, 502, 503, 504)

DEFAULT_MAX_RETRIES = 3
RATE_LIMIT_BASE_DELAY = 2.0
SERVER_ERROR_BASE_DELAY = 1.0
JITTER_MAX_SECONDS = 1.0


@dataclass(frozen=True)
class RetryDecision:
    """
    Decisão consultiva da política de retry.

    Attributes:
        retry (bool): True se a requisição deve ser repetida.
        delay_seconds (float): Espera antes da próxima tentativa.
    """
    retry: bool
    delay_seconds: float = 0.0


def is_server_error(outcome: int | str) -> bool:
    """True para qualquer status 5xx."""
    return isinstance(outcome, int) and 500 <= outcome <= 599


def is_retryable(outcome: int | str) -> bool:
    """
    Indica se um resultado pode passar por retry, independente de tentativas.

    Args:
        outcome (int | str): Status HTTP ou tipo de falha de transporte.
    """
    if isinstance(outcome, str):
        return outcome in RETRYABLE_TRANSPORT_KINDS
    return outcome == RATE_LIMIT_STATUS or is_server_error(outcome)


class RetryPolicy:
    """
    Decide se uma requisição falhada deve ser repetida e quanto esperar.

    - 429: espera baseada no intervalo médio do próprio endpoint
      (janela / limite) + jitter + componente linear por tentativa. Sem limite
      conhecido, backoff exponencial de 2s com jitter.
    - 5xx e falhas de transporte: backoff exponencial de 1s.
    - Demais 4xx: nunca.

    No máximo ``max_retries`` retries, ou seja ``max_retries + 1`` tentativas.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        rng: random.Random | None = None,
    ):
        """
        Args:
            rate_limiter (RateLimiter | None): Fonte dos limites por endpoint.
            max_retries (int): Retries permitidos além da tentativa original.
            rng (random.Random | None): Fonte de aleatoriedade do jitter (injetável para testes).
        """
        self.rate_limiter = rate_limiter
        self.max_retries = max_retries
        self._rng = rng or random.Random()

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def _jitter(self) -> float:
        return self._rng.uniform(0, JITTER_MAX_SECONDS)

    def _rate_limit_delay(self, attempt: int, endpoint_key: str | None) -> float:
        rate_limit = self.rate_limiter.rate_limit_for(endpoint_key) if self.rate_limiter else None

        if rate_limit is not None:
            interval = rate_limit.interval_seconds
            delay = interval + self._jitter() + attempt * interval / 2
            logger.warning(
                "Rate limit (429) em %s (limite específico). Aguardando %.2fs antes do retry.",
                endpoint_key,
                delay,
            )
            return delay

        delay = (2 ** attempt) * RATE_LIMIT_BASE_DELAY + self._jitter()
        logger.warning(
            "Rate limit (429) em %s (genérico). Aguardando %.2fs antes do retry.",
            endpoint_key,
            delay,
        )
        return delay

    def should_retry(
        self,
        outcome: int | str,
        attempt: int,
        endpoint_key: str | None = None,
    ) -> RetryDecision:
        """
        Avalia uma falha.

        Args:
            outcome (int | str): Status HTTP ou tipo de falha de transporte.
            attempt (int): Retries já realizados para esta requisição (0 na primeira falha).
            endpoint_key (str | None): Endpoint, para o cálculo do atraso específico.

        Returns:
            RetryDecision: Se deve repetir e com qual atraso.
        """
        if not is_retryable(outcome):
            return RetryDecision(retry=False)

        if attempt >= self.max_retries:
            logger.error(
                "Orçamento de retries esgotado para %s após %d tentativas (último resultado: %s).",
                endpoint_key,
                attempt + 1,
                outcome,
            )
            return RetryDecision(retry=False)

        if outcome == RATE_LIMIT_STATUS:
            return RetryDecision(retry=True, delay_seconds=self._rate_limit_delay(attempt, endpoint_key))

        delay = (2 ** attempt) * SERVER_ERROR_BASE_DELAY
        logger.warning(
            "Erro retryável (%s) em %s. Aguardando %.2fs antes do retry.",
            outcome,
            endpoint_key,
            delay,
        )
        return RetryDecision(retry=True, delay_seconds=delay)
