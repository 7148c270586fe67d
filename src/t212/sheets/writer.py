import logging

from gspread import Spreadsheet

from ._retry import retry
from .worksheet import get_worksheet

logger = logging.getLogger(__name__)


class SheetRowSink:
    """
    Escreve o resultado de uma sincronização em uma aba, substituindo o conteúdo anterior.
    """

    def __init__(self, spreadsheet: Spreadsheet):
        self.spreadsheet = spreadsheet

    def write_rows(self, sheet_name: str, headers: list[str], rows: list[list]) -> None:
        """
        Limpa a aba e escreve cabeçalho (linha 1) e linhas (a partir da linha 2) em uma única chamada.

        A aba é criada se não existir e redimensionada para caber os dados.

        Args:
            sheet_name (str): Nome da aba.
            headers (list[str]): Cabeçalho exibido.
            rows (list[list]): Linhas de dados.
        """
        worksheet = get_worksheet(self.spreadsheet, sheet_name, headers, create=True)

        values = [list(headers)] + [list(row) for row in rows]
        width = max((len(row) for row in values), default=1) or 1

        retry(lambda: worksheet.clear())
        retry(lambda: worksheet.resize(rows=max(len(values), 1), cols=width))
        retry(lambda: worksheet.update(values=values, range_name="A1"))

        logger.info("Aba '%s' atualizada: %d linhas de dados.", sheet_name, len(rows))
