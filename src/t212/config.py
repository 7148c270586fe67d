from dataclasses import dataclass
import os

from dotenv import load_dotenv

from .errors import ConfigurationError

# Carrega as variáveis de ambiente do arquivo .env
load_dotenv()

API_VERSION = "/api/v0"

API_DOMAINS = {
    "demo": "https://demo.trading212.com",
    "live": "https://live.trading212.com",
}


@dataclass(frozen=True)
class Config:
    """
    Configurações do sincronizador, obtidas de variáveis de ambiente.

    Funciona também como provedor de credenciais para o ApiClient
    (chave da API e URL base do ambiente selecionado).

    Attributes:
        api_key (str | None): Chave da API, da variável T212_API_KEY.
        environment (str | None): Ambiente 'demo' ou 'live', da variável T212_ENVIRONMENT.
        spreadsheet_id (str | None): ID da planilha, da variável SPREADSHEET_ID.
        service_account_file (str | None): Caminho da service account, da variável SERVICE_ACCOUNT_FILE.
        cache_ttl_seconds (float | None): TTL do cache de respostas, da variável T212_CACHE_TTL.
        max_wait_seconds (float | None): Espera máxima tolerada antes de uma requisição,
            da variável T212_MAX_WAIT_SECONDS.
    """
    api_key: str | None = None
    environment: str | None = None
    spreadsheet_id: str | None = None
    service_account_file: str | None = None
    cache_ttl_seconds: float | None = None
    max_wait_seconds: float | None = None

    def __post_init__(self):
        if self.api_key is None:
            object.__setattr__(self, 'api_key', os.getenv('T212_API_KEY'))
        if self.environment is None:
            object.__setattr__(self, 'environment', os.getenv('T212_ENVIRONMENT', 'demo'))
        if self.spreadsheet_id is None:
            object.__setattr__(self, 'spreadsheet_id', os.getenv('SPREADSHEET_ID'))
        if self.service_account_file is None:
            object.__setattr__(self, 'service_account_file', os.getenv('SERVICE_ACCOUNT_FILE'))
        if self.cache_ttl_seconds is None:
            object.__setattr__(self, 'cache_ttl_seconds', _float_env('T212_CACHE_TTL', 300.0))
        if self.max_wait_seconds is None:
            object.__setattr__(self, 'max_wait_seconds', _float_env('T212_MAX_WAIT_SECONDS', 300.0))

        object.__setattr__(self, 'environment', self.environment.strip().lower())

        if not self.api_key:
            raise ConfigurationError("A variável de ambiente 'T212_API_KEY' é obrigatória.")
        if self.environment not in API_DOMAINS:
            raise ConfigurationError(
                f"Ambiente inválido: '{self.environment}'. Use 'demo' ou 'live'."
            )

    @property
    def domain(self) -> str:
        """Domínio do ambiente selecionado (sem a versão da API)."""
        return API_DOMAINS[self.environment]

    @property
    def base_url(self) -> str:
        """URL base versionada do ambiente selecionado."""
        return f"{self.domain}{API_VERSION}"

    def get_credential(self) -> str:
        """
        Retorna a chave da API usada no header Authorization.

        Raises:
            ConfigurationError: Se a chave não estiver configurada.
        """
        if not self.api_key:
            raise ConfigurationError("Chave da API não configurada.")
        return self.api_key

    def require_spreadsheet(self) -> tuple[str, str]:
        """
        Valida as configurações exigidas pelos adaptadores do Google Sheets.

        Returns:
            tuple[str, str]: (spreadsheet_id, service_account_file)
        """
        if not self.spreadsheet_id:
            raise ConfigurationError("A variável de ambiente 'SPREADSHEET_ID' é obrigatória.")
        if not self.service_account_file:
            raise ConfigurationError("A variável de ambiente 'SERVICE_ACCOUNT_FILE' é obrigatória.")
        return self.spreadsheet_id, self.service_account_file


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Valor numérico inválido para '{name}': '{raw}'") from None
