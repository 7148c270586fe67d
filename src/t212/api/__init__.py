"""
Camada de acesso à API da Trading 212.

Encapsula rate limiting por endpoint, cache de respostas, política de retry
e paginação por cursor em torno de um único GET autenticado.

Módulos:
    - endpoints: Catálogo de recursos e seus limites
    - rate_limiter: Janela deslizante por endpoint
    - cache: Cache de respostas com TTL
    - _retry: Política de retry com backoff e jitter
    - transport: Transporte HTTP (requests)
    - client: ApiClient
"""

from ._retry import RetryDecision, RetryPolicy
from .cache import ResponseCache
from .client import ApiClient, ConnectionCheck, cursor_from_path, split_page
from .endpoints import (
    ENDPOINTS,
    PIE_ITEMS_KEY,
    PIE_ITEMS_SHEET_NAME,
    EndpointDescriptor,
    RateLimit,
    default_rate_limits,
)
from .rate_limiter import RateLimitDecision, RateLimiter
from .transport import HttpResponse, RequestsTransport, TransportError

__all__ = [
    "ApiClient",
    "ConnectionCheck",
    "split_page",
    "cursor_from_path",
    "ENDPOINTS",
    "PIE_ITEMS_KEY",
    "PIE_ITEMS_SHEET_NAME",
    "EndpointDescriptor",
    "RateLimit",
    "default_rate_limits",
    "RateLimiter",
    "RateLimitDecision",
    "ResponseCache",
    "RetryPolicy",
    "RetryDecision",
    "HttpResponse",
    "RequestsTransport",
    "TransportError",
]
