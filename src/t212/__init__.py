"""
T212 G-Sheets Sync

Sincroniza dados de uma conta da Trading 212 (pies, instrumentos, ordens,
dividendos, transações e saldo) com abas do Google Sheets.

Este módulo expõe as principais classes para uso externo:

- Config: Configuração (API key, ambiente, planilha)
- ApiClient: Cliente da API com rate limiting, cache e retry
- SyncOrchestrator: Sincronização de recursos para a planilha
"""

from .__version__ import __version__
from .api import ApiClient
from .config import Config
from .errors import (
    ApiError,
    ClientRequestError,
    ConfigurationError,
    RateLimitExceededError,
    T212Error,
    TransientServerError,
    describe_error,
)
from .orchestrator import ResourceOutcome, SyncOrchestrator, SyncResult

__all__ = [
    '__version__',
    'Config',
    'ApiClient',
    'SyncOrchestrator',
    'SyncResult',
    'ResourceOutcome',
    'T212Error',
    'ConfigurationError',
    'ApiError',
    'RateLimitExceededError',
    'TransientServerError',
    'ClientRequestError',
    'describe_error',
]
