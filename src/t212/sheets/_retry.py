import logging
import time
from collections.abc import Callable
from typing import TypeVar

from gspread.exceptions import APIError, SpreadsheetNotFound, WorksheetNotFound

from ..api._retry import RetryPolicy

logger = logging.getLogger(__name__)

ReturnType = TypeVar("ReturnType")

# Exceções que NÃO devem passar por retry (erros lógicos/esperados)
NON_RETRYABLE_EXCEPTIONS = (
    WorksheetNotFound,
    SpreadsheetNotFound,
    ValueError,
    KeyError,
    TypeError,
)

SHEETS_ENDPOINT_KEY = "GOOGLE_SHEETS"


def _status_code(error: APIError) -> int:
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    if isinstance(status, int):
        return status
    code = getattr(error, "code", None)
    return code if isinstance(code, int) else 0


def retry(
    function: Callable[[], ReturnType],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] | None = None,
) -> ReturnType:
    """
    Executa uma chamada ao gspread com retry para erros transitórios da API do Google.

    A decisão de repetir vem da mesma RetryPolicy usada pelo cliente da
    Trading 212: 429 e 5xx passam por retry com backoff, demais status são
    lançados imediatamente. Exceções lógicas/esperadas (WorksheetNotFound,
    SpreadsheetNotFound, ValueError, etc.) nunca passam por retry.

    Args:
        function (Callable): A função a ser executada.
        policy (RetryPolicy | None): Política de retry. Padrão: RetryPolicy sem limites por endpoint.
        sleep (Callable[[float], None] | None): Primitiva de espera. Padrão: time.sleep.

    Returns:
        O resultado da função executada, se bem-sucedida.
    """
    policy = policy if policy is not None else RetryPolicy()
    sleep = sleep if sleep is not None else time.sleep
    attempt = 0

    while True:
        try:
            return function()

        except NON_RETRYABLE_EXCEPTIONS:
            raise

        except APIError as e:
            status = _status_code(e)
            decision = policy.should_retry(status, attempt, SHEETS_ENDPOINT_KEY)
            if not decision.retry:
                logger.error(
                    "Chamada ao Google Sheets falhou após %d tentativas: %s",
                    attempt + 1,
                    str(e),
                )
                raise

            logger.warning(
                "Tentativa %d falhou com erro: %s. Retentando em %.2f segundos...",
                attempt + 1,
                str(e),
                decision.delay_seconds,
            )
            sleep(decision.delay_seconds)
            attempt += 1
