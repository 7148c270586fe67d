"""
Cliente da API da Trading 212.

Compõe RateLimiter, ResponseCache e RetryPolicy em torno de um único GET
autenticado, e expõe a paginação por cursor (nextPagePath) de forma
sequencial. Todos os colaboradores são injetáveis; não há instância global.
"""
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlencode, urljoin, urlsplit

from ..config import Config
from ..errors import (
    ApiError,
    ClientRequestError,
    ConfigurationError,
    RateLimitExceededError,
    TransientServerError,
)
from ._retry import RATE_LIMIT_STATUS, RetryPolicy, is_server_error
from .cache import ResponseCache
from .endpoints import (
    ACCOUNT_CASH,
    ACCOUNT_INFO,
    DIVIDENDS,
    ENDPOINTS,
    INSTRUMENTS_LIST,
    ORDER_HISTORY,
    PIE_DETAILS,
    PIES,
    TRANSACTIONS,
    EndpointDescriptor,
    default_rate_limits,
)
from .rate_limiter import RateLimiter
from .transport import HttpResponse, RequestsTransport, TransportError

logger = logging.getLogger(__name__)

NEXT_PAGE_FIELD = "nextPagePath"
ITEMS_FIELD = "items"


@dataclass(frozen=True)
class ConnectionCheck:
    """Resultado de test_connection."""
    success: bool
    error: str = ""


def split_page(data: Any) -> tuple[list, str | None]:
    """
    Separa uma resposta em (itens, próximo path).

    Aceita página no formato {"items": [...], "nextPagePath": ...}, lista
    simples ou objeto único (tratado como um item).

    Args:
        data (Any): Corpo JSON decodificado.

    Returns:
        tuple[list, str | None]: Itens da página e o path da próxima página, se houver.
    """
    if data is None:
        return [], None

    if isinstance(data, list):
        return list(data), None

    if isinstance(data, dict) and ITEMS_FIELD in data:
        items = data[ITEMS_FIELD]
        if items is None:
            items = []
        elif not isinstance(items, list):
            items = [items]
        return items, data.get(NEXT_PAGE_FIELD) or None

    return [data], None


def cursor_from_path(path: str | None) -> str | None:
    """
    Extrai o parâmetro ``cursor`` de um nextPagePath.

    Args:
        path (str | None): Path da próxima página (ex: "/api/v0/history/orders?cursor=123&limit=20").

    Returns:
        str | None: Último valor de ``cursor`` na query, ou None se ausente.
    """
    if not path:
        return None
    values = parse_qs(urlsplit(path).query).get("cursor")
    return values[-1] if values else None


class ApiClient:
    """
    Cliente síncrono da API com rate limiting, cache e retry.
    """

    def __init__(
        self,
        config: Config,
        transport: Any = None,
        rate_limiter: RateLimiter | None = None,
        cache: ResponseCache | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        max_wait_seconds: float | None = None,
        wait_buffer_seconds: float = 0.5,
        endpoints: dict[str, EndpointDescriptor] | None = None,
    ):
        """
        Args:
            config (Config): Provedor de credencial e URL base.
            transport: Objeto com ``get(url, headers) -> HttpResponse``. Padrão: RequestsTransport.
            rate_limiter (RateLimiter | None): Padrão: limites do catálogo de endpoints.
            cache (ResponseCache | None): Padrão: cache em memória.
            retry_policy (RetryPolicy | None): Padrão: RetryPolicy ligada ao rate limiter.
            sleep (Callable[[float], None]): Primitiva de espera (injetável para testes).
            max_wait_seconds (float | None): Teto de espera proativa. Padrão: config.max_wait_seconds.
            wait_buffer_seconds (float): Folga somada à espera do rate limiter.
            endpoints (dict[str, EndpointDescriptor] | None): Catálogo. Padrão: ENDPOINTS.
        """
        self.config = config
        self.endpoints: dict[str, EndpointDescriptor] = dict(endpoints if endpoints is not None else ENDPOINTS)
        self.transport = transport if transport is not None else RequestsTransport()

        if rate_limiter is None:
            rate_limiter = RateLimiter(default_rate_limits(self.endpoints))
        self.rate_limiter = rate_limiter
        self.cache = cache if cache is not None else ResponseCache()
        self.retry_policy = retry_policy if retry_policy is not None else RetryPolicy(self.rate_limiter)

        self._sleep = sleep
        self.max_wait_seconds = (
            max_wait_seconds if max_wait_seconds is not None else config.max_wait_seconds
        )
        self.wait_buffer_seconds = wait_buffer_seconds
        self.cache_ttl = config.cache_ttl_seconds

        logger.info("ApiClient inicializado no ambiente '%s' (%s)", config.environment, config.base_url)

    # ------------------------------------------------------------------
    # Montagem da requisição
    # ------------------------------------------------------------------

    def build_url(self, path: str, params: dict | None = None) -> str:
        """
        Monta a URL completa de uma requisição.

        Paths absolutos (ex: o nextPagePath "/api/v0/...") são resolvidos contra o
        domínio; paths relativos são anexados à URL base versionada.

        Args:
            path (str): Path do endpoint ou da próxima página.
            params (dict | None): Parâmetros de query (valores None são ignorados).

        Returns:
            str: URL completa.
        """
        if path.startswith(("http://", "https://", "/")):
            url = urljoin(self.config.domain, path)
        else:
            url = f"{self.config.base_url}/{path}"

        query = {key: value for key, value in (params or {}).items() if value is not None}
        if query:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{urlencode(query)}"
        return url

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": self.config.get_credential(),
            "Content-Type": "application/json",
        }

    def descriptor(self, endpoint_key: str) -> EndpointDescriptor:
        descriptor = self.endpoints.get(endpoint_key)
        if descriptor is None:
            raise ConfigurationError(
                f"Endpoint não configurado: '{endpoint_key}'", endpoint_key=endpoint_key
            )
        return descriptor

    def register_endpoint(self, descriptor: EndpointDescriptor) -> None:
        """
        Adiciona (ou substitui) um endpoint no catálogo e seu limite no rate limiter.

        Args:
            descriptor (EndpointDescriptor): Descritor do endpoint.
        """
        if self.endpoints.get(descriptor.key) == descriptor:
            return
        self.endpoints[descriptor.key] = descriptor
        self.rate_limiter.set_rate_limit(descriptor.key, descriptor.rate_limit)
        logger.debug("Endpoint registrado: %s (%s)", descriptor.key, descriptor.path)

    # ------------------------------------------------------------------
    # Espera e retry
    # ------------------------------------------------------------------

    def _wait_for_rate_limit(self, endpoint_key: str, attempt: int) -> None:
        """
        Bloqueia até o rate limiter liberar o endpoint.

        Raises:
            ConfigurationError: Se a espera necessária exceder max_wait_seconds.
        """
        while True:
            decision = self.rate_limiter.can_proceed(endpoint_key)
            if decision.allowed:
                return

            wait_seconds = decision.wait_seconds + self.wait_buffer_seconds
            if wait_seconds > self.max_wait_seconds:
                logger.error(
                    "Espera de %.1fs para %s excede o limite de %.1fs.",
                    wait_seconds,
                    endpoint_key,
                    self.max_wait_seconds,
                )
                raise ConfigurationError(
                    f"Espera proativa de {wait_seconds:.1f}s excede o limite de execução "
                    f"de {self.max_wait_seconds:.1f}s.",
                    endpoint_key=endpoint_key,
                    attempts=attempt,
                )

            logger.info(
                "Rate limit atingido para %s. Aguardando proativamente %.2fs.",
                endpoint_key,
                wait_seconds,
            )
            self._sleep(wait_seconds)

    def _backoff(self, delay_seconds: float, endpoint_key: str, attempt: int) -> None:
        """
        Aguarda o atraso de retry, respeitando o mesmo teto da espera proativa.

        Raises:
            ConfigurationError: Se o atraso exceder max_wait_seconds.
        """
        if delay_seconds > self.max_wait_seconds:
            logger.error(
                "Atraso de retry de %.1fs para %s excede o limite de %.1fs.",
                delay_seconds,
                endpoint_key,
                self.max_wait_seconds,
            )
            raise ConfigurationError(
                f"Atraso de retry de {delay_seconds:.1f}s excede o limite de execução "
                f"de {self.max_wait_seconds:.1f}s.",
                endpoint_key=endpoint_key,
                attempts=attempt + 1,
            )
        self._sleep(delay_seconds)

    def _parse_body(self, response: HttpResponse, endpoint_key: str, attempts: int) -> Any:
        if not response.body or not response.body.strip():
            return None
        try:
            return json.loads(response.body)
        except ValueError as e:
            logger.error("Resposta inválida (JSON malformado) de %s: %s", endpoint_key, e)
            raise ApiError(
                f"Resposta JSON inválida de {endpoint_key}",
                endpoint_key=endpoint_key,
                status_code=response.status_code,
                attempts=attempts,
                response_body=response.body,
            ) from e

    def _error_for(self, response: HttpResponse, endpoint_key: str, attempts: int) -> ApiError:
        """Classifica uma resposta terminal na exceção tipada correspondente."""
        status = response.status_code
        body = response.body or ""
        details = body[:200] + ("..." if len(body) > 200 else "")
        message = f"Requisição a {endpoint_key} falhou: status {status}"
        if details:
            message += f" - {details}"

        kwargs = {
            "endpoint_key": endpoint_key,
            "status_code": status,
            "attempts": attempts,
            "response_body": body,
        }

        if status == RATE_LIMIT_STATUS:
            return RateLimitExceededError(message, **kwargs)
        if is_server_error(status):
            return TransientServerError(message, **kwargs)
        if 400 <= status < 500:
            return ClientRequestError(message, **kwargs)
        return ApiError(message, **kwargs)

    def _request_with_retry(self, url: str, endpoint_key: str, headers: dict[str, str]) -> Any:
        """
        Executa o GET com rate limiting antes de cada tentativa e retry consultivo.

        Raises:
            ConfigurationError: Espera acima do teto.
            RateLimitExceededError, TransientServerError, ClientRequestError, ApiError.
        """
        attempt = 0

        while True:
            self._wait_for_rate_limit(endpoint_key, attempt)
            logger.debug("GET %s (tentativa %d)", url, attempt + 1)

            try:
                response = self.transport.get(url, headers)
            except TransportError as e:
                decision = self.retry_policy.should_retry(e.kind, attempt, endpoint_key)
                if decision.retry:
                    self._backoff(decision.delay_seconds, endpoint_key, attempt)
                    attempt += 1
                    continue
                logger.error("Falha de transporte em %s após %d tentativas: %s", endpoint_key, attempt + 1, e)
                raise TransientServerError(
                    f"Falha de transporte em {endpoint_key}: {e}",
                    endpoint_key=endpoint_key,
                    attempts=attempt + 1,
                ) from e

            if 200 <= response.status_code < 300:
                return self._parse_body(response, endpoint_key, attempt + 1)

            decision = self.retry_policy.should_retry(response.status_code, attempt, endpoint_key)
            if decision.retry:
                self._backoff(decision.delay_seconds, endpoint_key, attempt)
                attempt += 1
                continue

            error = self._error_for(response, endpoint_key, attempt + 1)
            logger.error("%s (tentativas: %d)", error, attempt + 1)
            raise error

    # ------------------------------------------------------------------
    # Operações públicas
    # ------------------------------------------------------------------

    def get(
        self,
        endpoint_key: str,
        path: str | None = None,
        params: dict | None = None,
        use_cache: bool = True,
        cache_ttl: float | None = None,
    ) -> Any:
        """
        GET autenticado com cache, rate limiting e retry.

        Args:
            endpoint_key (str): Chave do endpoint (bucket de rate limit e cache).
            path (str | None): Path a requisitar. Padrão: path do descritor.
            params (dict | None): Parâmetros de query.
            use_cache (bool): Consulta e alimenta o cache.
            cache_ttl (float | None): TTL desta chamada. Padrão: config.cache_ttl_seconds.

        Returns:
            Any: Corpo JSON decodificado.
        """
        descriptor = self.descriptor(endpoint_key)
        if path is None:
            path = descriptor.path
        params = dict(params or {})

        cache_key = self.cache.make_key(endpoint_key, path, params)
        if use_cache:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Cache hit para %s (%s)", endpoint_key, path)
                return cached

        headers = self._headers()
        url = self.build_url(path, params)
        data = self._request_with_retry(url, endpoint_key, headers)

        if use_cache and data is not None:
            ttl = cache_ttl if cache_ttl is not None else self.cache_ttl
            self.cache.put(cache_key, data, ttl)

        return data

    def fetch_all_pages(
        self,
        endpoint_key: str,
        path: str | None = None,
        params: dict | None = None,
        use_cache: bool = True,
        on_page: Callable[[int, int], None] | None = None,
        on_cursor: Callable[[str], None] | None = None,
    ) -> list:
        """
        Busca todas as páginas de um recurso seguindo o nextPagePath.

        A primeira página usa (path, params); as seguintes usam apenas o path
        fornecido pelo servidor. Os itens são acumulados na ordem de chegada.
        Se qualquer página falhar, a exceção é propagada e nada é retornado.

        Args:
            endpoint_key (str): Chave do endpoint.
            path (str | None): Path da primeira página. Padrão: path do descritor.
            params (dict | None): Parâmetros da primeira página.
            use_cache (bool): Usa o cache de respostas.
            on_page (Callable[[int, int], None] | None): Callback (número da página, itens acumulados).
            on_cursor (Callable[[str], None] | None): Callback com cada nextPagePath seguido.

        Returns:
            list: Todos os itens.
        """
        all_items: list = []
        next_page_path: str | None = None
        seen_paths: set[str] = set()
        page_number = 0

        while True:
            if next_page_path:
                data = self.get(endpoint_key, next_page_path, None, use_cache=use_cache)
            else:
                data = self.get(endpoint_key, path, params, use_cache=use_cache)

            page_number += 1
            items, next_page_path = split_page(data)
            all_items.extend(items)
            logger.debug(
                "Página %d de %s: %d itens (%d acumulados)",
                page_number,
                endpoint_key,
                len(items),
                len(all_items),
            )

            if on_page is not None:
                on_page(page_number, len(all_items))

            if not next_page_path:
                break

            if next_page_path in seen_paths:
                raise ApiError(
                    f"Cursor repetido na paginação de {endpoint_key}: {next_page_path}",
                    endpoint_key=endpoint_key,
                )
            seen_paths.add(next_page_path)
            if on_cursor is not None:
                on_cursor(next_page_path)

        logger.info("%s: %d itens em %d páginas", endpoint_key, len(all_items), page_number)
        return all_items

    def test_connection(self) -> ConnectionCheck:
        """
        Testa a conexão com uma chamada sem cache a ACCOUNT_INFO.

        Returns:
            ConnectionCheck: Sucesso ou mensagem de erro. Nunca lança.
        """
        try:
            self.get(ACCOUNT_INFO.key, use_cache=False)
        except (ApiError, ConfigurationError) as e:
            logger.warning("Teste de conexão falhou: %s", e)
            return ConnectionCheck(success=False, error=str(e))

        logger.info("Teste de conexão bem-sucedido")
        return ConnectionCheck(success=True)

    # ------------------------------------------------------------------
    # Recursos
    # ------------------------------------------------------------------

    def get_account_info(self, use_cache: bool = True) -> Any:
        return self.get(ACCOUNT_INFO.key, use_cache=use_cache)

    def get_account_cash(self, use_cache: bool = True) -> Any:
        return self.get(ACCOUNT_CASH.key, use_cache=use_cache)

    def get_pies(self, use_cache: bool = True) -> list:
        return self.fetch_all_pages(PIES.key, use_cache=use_cache)

    def get_pie_details(self, pie_id: int | str, use_cache: bool = True) -> Any:
        """
        Busca os detalhes de uma pie.

        Raises:
            ValueError: Se o ID não for informado.
        """
        if pie_id is None or pie_id == "":
            raise ValueError("O ID da pie é obrigatório para buscar seus detalhes.")
        path = PIE_DETAILS.path.format(pie_id=pie_id)
        return self.get(PIE_DETAILS.key, path, use_cache=use_cache)

    def get_instruments_list(self, use_cache: bool = True) -> list:
        return self.fetch_all_pages(INSTRUMENTS_LIST.key, use_cache=use_cache)

    def get_transactions(
        self,
        limit: int = 50,
        cursor: str | None = None,
        since: str | None = None,
        use_cache: bool = True,
    ) -> list:
        params = {"limit": limit, "cursor": cursor, "time": since}
        return self.fetch_all_pages(TRANSACTIONS.key, params=params, use_cache=use_cache)

    def get_order_history(
        self,
        limit: int = 20,
        cursor: str | None = None,
        ticker: str | None = None,
        use_cache: bool = True,
    ) -> list:
        params = {"limit": limit, "cursor": cursor, "ticker": ticker}
        return self.fetch_all_pages(ORDER_HISTORY.key, params=params, use_cache=use_cache)

    def get_dividends(
        self,
        limit: int = 50,
        cursor: str | None = None,
        ticker: str | None = None,
        use_cache: bool = True,
    ) -> list:
        params = {"limit": limit, "cursor": cursor, "ticker": ticker}
        return self.fetch_all_pages(DIVIDENDS.key, params=params, use_cache=use_cache)

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()
