"""
Persistência dos mapeamentos de cabeçalho em uma aba da própria planilha.

Cada linha da aba ``HeaderMappings`` associa um caminho da API de um recurso
ao nome de coluna exibido. Editar a coluna "Transformed Header Name" e marcar
"User Override Flag" como TRUE renomeia a coluna nas próximas sincronizações.
"""
import logging

from gspread import Spreadsheet, Worksheet

from ..data.header_mapping import HeaderMapping
from ._retry import retry
from .worksheet import get_worksheet

logger = logging.getLogger(__name__)

HEADER_MAPPINGS_SHEET_NAME = "HeaderMappings"
HEADER_MAPPINGS_COLUMNS = [
    "API Resource Name",
    "Original API Field Path",
    "Transformed Header Name",
    "User Override Flag",
]

_TRUE_VALUES = ("true", "1", "yes", "sim")


def _parse_flag(value: str) -> bool:
    return str(value).strip().lower() in _TRUE_VALUES


class SheetHeaderStore:
    """
    Header store baseado na aba HeaderMappings.
    """

    def __init__(self, spreadsheet: Spreadsheet, sheet_name: str = HEADER_MAPPINGS_SHEET_NAME):
        self.spreadsheet = spreadsheet
        self.sheet_name = sheet_name
        self._worksheet: Worksheet | None = None

    @property
    def worksheet(self) -> Worksheet:
        if self._worksheet is None:
            self._worksheet = get_worksheet(
                self.spreadsheet, self.sheet_name, HEADER_MAPPINGS_COLUMNS, create=True
            )
        return self._worksheet

    def _read_rows(self) -> list[list[str]]:
        values = retry(lambda: self.worksheet.get_all_values())
        # Primeira linha é o cabeçalho da aba
        return [row for row in values[1:] if any(cell for cell in row)]

    def get_stored_headers(self, resource_key: str) -> list[HeaderMapping] | None:
        """
        Lê o mapeamento armazenado de um recurso.

        Args:
            resource_key (str): Chave do recurso.

        Returns:
            list[HeaderMapping] | None: Mapeamento na ordem da aba, ou None se não houver.
        """
        mappings = []
        for row in self._read_rows():
            row = (list(row) + [""] * len(HEADER_MAPPINGS_COLUMNS))[: len(HEADER_MAPPINGS_COLUMNS)]
            resource, path, display_name, flag = row
            if resource != resource_key or not path:
                continue
            mappings.append(HeaderMapping(path, display_name or path, _parse_flag(flag)))

        if not mappings:
            logger.debug("Nenhum mapeamento armazenado para %s.", resource_key)
            return None
        return mappings

    def store_headers(self, resource_key: str, mappings: list[HeaderMapping]) -> None:
        """
        Substitui o mapeamento de um recurso, preservando os demais recursos.

        Args:
            resource_key (str): Chave do recurso.
            mappings (list[HeaderMapping]): Mapeamento completo do recurso.
        """
        kept_rows = [row for row in self._read_rows() if row and row[0] != resource_key]
        new_rows = [
            [
                resource_key,
                mapping.original_path,
                mapping.display_name,
                "TRUE" if mapping.is_user_override else "FALSE",
            ]
            for mapping in mappings
        ]
        values = [HEADER_MAPPINGS_COLUMNS] + kept_rows + new_rows

        worksheet = self.worksheet
        retry(lambda: worksheet.clear())
        retry(lambda: worksheet.resize(rows=len(values), cols=len(HEADER_MAPPINGS_COLUMNS)))
        retry(lambda: worksheet.update(values=values, range_name="A1"))
        logger.info("Mapeamento de cabeçalhos armazenado para %s (%d campos).", resource_key, len(mappings))
