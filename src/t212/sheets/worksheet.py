import logging

from gspread import Spreadsheet, Worksheet, WorksheetNotFound

from ._retry import retry

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 100


def _create_worksheet(spreadsheet: Spreadsheet, worksheet_name: str, header: list[str]) -> Worksheet:
    """
    Cria uma nova aba, já com o cabeçalho na primeira linha se informado.

    Args:
        spreadsheet (Spreadsheet): A planilha onde a nova aba será criada.
        worksheet_name (str): Nome da nova aba.
        header (list[str]): Cabeçalho inicial (pode ser vazio).

    Returns:
        Worksheet: A aba criada.
    """
    logger.debug("Criando a aba '%s' na planilha '%s'.", worksheet_name, spreadsheet.title)
    worksheet = retry(
        lambda: spreadsheet.add_worksheet(
            title=worksheet_name, rows=DEFAULT_ROWS, cols=max(len(header), 1)
        )
    )
    if header:
        retry(lambda: worksheet.insert_row(header, index=1))
    logger.info("Aba criada com sucesso: %s", worksheet.title)
    return worksheet


def get_worksheet(
    spreadsheet: Spreadsheet,
    worksheet_name: str,
    header: list[str] | None = None,
    create: bool = True,
) -> Worksheet:
    """
    Obtém uma aba da planilha, criando-a se necessário.

    Args:
        spreadsheet (Spreadsheet): A planilha onde a aba será obtida.
        worksheet_name (str): Nome da aba.
        header (list[str] | None): Cabeçalho usado apenas ao criar a aba.
        create (bool): Indica se a aba deve ser criada se não existir.

    Returns:
        Worksheet: A aba obtida ou criada.
    """
    try:
        logger.debug("Obtendo a aba '%s' da planilha '%s'.", worksheet_name, spreadsheet.title)
        worksheet = retry(lambda: spreadsheet.worksheet(worksheet_name))
        logger.debug("Aba obtida com sucesso: %s", worksheet.title)
        return worksheet

    except WorksheetNotFound:
        logger.warning(
            "Aba '%s' não encontrada na planilha '%s'.", worksheet_name, spreadsheet.title
        )
        if create:
            return _create_worksheet(spreadsheet, worksheet_name, header or [])
        raise
