"""
Gateway para acesso ao Google Sheets.

Este módulo encapsula a escrita dos recursos sincronizados e a persistência
dos mapeamentos de cabeçalho e do estado de sincronização, com retry
automático nas chamadas ao gspread.

Módulos:
    - connection: Conexão e obtenção de spreadsheets
    - worksheet: Gerenciamento de abas (worksheets)
    - writer: Escrita das linhas de um recurso (row sink)
    - header_store: Mapeamentos de cabeçalho na aba HeaderMappings
    - sync_state_store: Último cursor e "Last Updated" na aba SyncState
"""

from ._retry import retry
from .connection import get_spreadsheet
from .header_store import HEADER_MAPPINGS_COLUMNS, HEADER_MAPPINGS_SHEET_NAME, SheetHeaderStore
from .sync_state_store import SYNC_STATE_COLUMNS, SYNC_STATE_SHEET_NAME, SheetSyncStateStore
from .worksheet import get_worksheet
from .writer import SheetRowSink

__all__ = [
    "retry",
    "get_spreadsheet",
    "get_worksheet",
    "SheetRowSink",
    "SheetHeaderStore",
    "SheetSyncStateStore",
    "HEADER_MAPPINGS_COLUMNS",
    "HEADER_MAPPINGS_SHEET_NAME",
    "SYNC_STATE_COLUMNS",
    "SYNC_STATE_SHEET_NAME",
]
