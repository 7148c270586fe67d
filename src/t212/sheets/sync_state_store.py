"""
Persistência do estado de sincronização na aba ``SyncState``.

Uma linha por recurso, com o último cursor seguido e a coluna "Last Updated".
"""
import logging

from gspread import Spreadsheet, Worksheet

from ..data.sync_state import SyncState
from ._retry import retry
from .worksheet import get_worksheet

logger = logging.getLogger(__name__)

SYNC_STATE_SHEET_NAME = "SyncState"
SYNC_STATE_COLUMNS = [
    "API Resource Name",
    "Last Cursor",
    "Last Updated",
]


class SheetSyncStateStore:
    """
    Sync state store baseado na aba SyncState.
    """

    def __init__(self, spreadsheet: Spreadsheet, sheet_name: str = SYNC_STATE_SHEET_NAME):
        self.spreadsheet = spreadsheet
        self.sheet_name = sheet_name
        self._worksheet: Worksheet | None = None

    @property
    def worksheet(self) -> Worksheet:
        if self._worksheet is None:
            self._worksheet = get_worksheet(
                self.spreadsheet, self.sheet_name, SYNC_STATE_COLUMNS, create=True
            )
        return self._worksheet

    def _read_rows(self) -> list[list[str]]:
        values = retry(lambda: self.worksheet.get_all_values())
        rows = []
        for row in values[1:]:
            if any(cell for cell in row):
                rows.append((list(row) + [""] * len(SYNC_STATE_COLUMNS))[: len(SYNC_STATE_COLUMNS)])
        return rows

    def get_state(self, resource_key: str) -> SyncState | None:
        """
        Lê o estado armazenado de um recurso.

        Returns:
            SyncState | None: Estado do recurso, ou None se não houver linha para ele.
        """
        for resource, cursor, updated in self._read_rows():
            if resource == resource_key:
                return SyncState(resource, cursor or None, updated)
        return None

    def store_state(self, state: SyncState) -> None:
        """
        Grava o estado de um recurso, substituindo a linha anterior e mantendo as demais.

        Args:
            state (SyncState): Estado da sincronização.
        """
        kept_rows = [row for row in self._read_rows() if row[0] != state.resource_key]
        new_row = [state.resource_key, state.last_cursor or "", state.last_updated]
        values = [SYNC_STATE_COLUMNS] + kept_rows + [new_row]

        worksheet = self.worksheet
        retry(lambda: worksheet.clear())
        retry(lambda: worksheet.resize(rows=len(values), cols=len(SYNC_STATE_COLUMNS)))
        retry(lambda: worksheet.update(values=values, range_name="A1"))
        logger.info("Estado de sincronização armazenado para %s (%s).", state.resource_key, state.last_updated)
