import logging
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)

TRANSPORT_TIMEOUT = "timeout"
TRANSPORT_CONNECTION = "connection"

# Tipos de falha de transporte que podem passar por retry
RETRYABLE_TRANSPORT_KINDS = (TRANSPORT_TIMEOUT, TRANSPORT_CONNECTION)


@dataclass(frozen=True)
class HttpResponse:
    """
    Resposta HTTP mínima consumida pelo ApiClient.

    Attributes:
        status_code (int): Status HTTP.
        body (str): Corpo da resposta como texto.
    """
    status_code: int
    body: str


class TransportError(Exception):
    """
    Falha de transporte classificada (sem resposta HTTP).

    Attributes:
        kind (str): "timeout", "connection" ou "other".
    """

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind


class RequestsTransport:
    """
    Transporte HTTP síncrono sobre requests.Session.

    Respostas não-2xx são retornadas normalmente, sem lançar exceção, para
    que a política de retry possa inspecionar o status.
    """

    def __init__(self, session: requests.Session | None = None, timeout: float = 30.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    def get(self, url: str, headers: dict[str, str]) -> HttpResponse:
        """
        Executa um GET.

        Args:
            url (str): URL completa.
            headers (dict[str, str]): Headers da requisição.

        Returns:
            HttpResponse: Status e corpo, qualquer que seja o status.

        Raises:
            TransportError: Em timeout, erro de conexão ou outra falha de rede.
        """
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransportError(TRANSPORT_TIMEOUT, f"Timeout em GET {url}: {e}") from e
        except requests.ConnectionError as e:
            raise TransportError(TRANSPORT_CONNECTION, f"Erro de conexão em GET {url}: {e}") from e
        except requests.RequestException as e:
            raise TransportError("other", f"Falha de transporte em GET {url}: {e}") from e

        return HttpResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        self.session.close()
