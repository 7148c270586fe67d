"""
Catálogo dos recursos da API da Trading 212.

Cada recurso lógico tem um único EndpointDescriptor; a chave (``key``) é a
identidade usada pelo RateLimiter e pelo ResponseCache.
"""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RateLimit:
    """
    Limite de requisições em janela deslizante.

    Attributes:
        max_requests (int): Máximo de requisições permitidas na janela.
        window_seconds (float): Tamanho da janela em segundos.
    """
    max_requests: int
    window_seconds: float

    def __post_init__(self):
        if self.max_requests <= 0:
            raise ValueError("max_requests deve ser maior que zero.")
        if self.window_seconds <= 0:
            raise ValueError("window_seconds deve ser maior que zero.")

    @property
    def interval_seconds(self) -> float:
        """Intervalo médio entre requisições (janela / limite)."""
        return self.window_seconds / self.max_requests


@dataclass(frozen=True)
class EndpointDescriptor:
    """
    Descritor imutável de um recurso da API.

    Attributes:
        key (str): Identificador estável (ex: "TRANSACTIONS").
        path (str): Caminho relativo à URL base versionada.
        sheet_name (str): Nome da aba de destino.
        rate_limit (RateLimit | None): Limite do endpoint, se conhecido.
        paginated (bool): Indica se o endpoint pagina via nextPagePath.
        default_params (dict): Parâmetros de query padrão da primeira página.
    """
    key: str
    path: str
    sheet_name: str
    rate_limit: RateLimit | None = None
    paginated: bool = False
    default_params: dict = field(default_factory=dict)


# ============================================================================
# RECURSOS
# ============================================================================

ACCOUNT_CASH = EndpointDescriptor(
    key="ACCOUNT_CASH",
    path="equity/account/cash",
    sheet_name="AccountCash",
    rate_limit=RateLimit(1, 2.0),
)

ACCOUNT_INFO = EndpointDescriptor(
    key="ACCOUNT_INFO",
    path="equity/account/info",
    sheet_name="AccountInfo",
    rate_limit=RateLimit(1, 30.0),
)

PIES = EndpointDescriptor(
    key="PIES",
    path="equity/pies",
    sheet_name="Pies",
    rate_limit=RateLimit(1, 30.0),
)

# Detalhes de uma pie específica; o path recebe o ID via format()
PIE_DETAILS = EndpointDescriptor(
    key="PIE_DETAILS",
    path="equity/pies/{pie_id}",
    sheet_name="PieItems",
    rate_limit=RateLimit(1, 5.0),
)

INSTRUMENTS_LIST = EndpointDescriptor(
    key="INSTRUMENTS_LIST",
    path="equity/metadata/instruments",
    sheet_name="InstrumentsList",
    rate_limit=RateLimit(1, 50.0),
)

ORDER_HISTORY = EndpointDescriptor(
    key="ORDER_HISTORY",
    path="equity/history/orders",
    sheet_name="OrderHistory",
    rate_limit=RateLimit(6, 60.0),
    paginated=True,
    default_params={"limit": 20},
)

DIVIDENDS = EndpointDescriptor(
    key="DIVIDENDS",
    path="history/dividends",
    sheet_name="Dividends",
    rate_limit=RateLimit(6, 60.0),
    paginated=True,
    default_params={"limit": 50},
)

TRANSACTIONS = EndpointDescriptor(
    key="TRANSACTIONS",
    path="equity/history/transactions",
    sheet_name="Transactions",
    rate_limit=RateLimit(6, 60.0),
    paginated=True,
    default_params={"limit": 50},
)

ENDPOINTS: dict[str, EndpointDescriptor] = {
    descriptor.key: descriptor
    for descriptor in (
        ACCOUNT_CASH,
        ACCOUNT_INFO,
        PIES,
        PIE_DETAILS,
        INSTRUMENTS_LIST,
        ORDER_HISTORY,
        DIVIDENDS,
        TRANSACTIONS,
    )
}

# Recurso derivado: itens de todas as pies, montado a partir de PIE_DETAILS
PIE_ITEMS_KEY = "PIE_ITEMS"
PIE_ITEMS_SHEET_NAME = "PieItems"


def default_rate_limits(catalog: dict[str, EndpointDescriptor] | None = None) -> dict[str, RateLimit]:
    """
    Retorna o mapa {chave do endpoint: RateLimit} de um catálogo.

    Args:
        catalog (dict[str, EndpointDescriptor] | None): Catálogo de endpoints. Padrão: ENDPOINTS.

    Returns:
        dict[str, RateLimit]: Limites configurados por endpoint.
    """
    return {
        key: descriptor.rate_limit
        for key, descriptor in (catalog if catalog is not None else ENDPOINTS).items()
        if descriptor.rate_limit is not None
    }
