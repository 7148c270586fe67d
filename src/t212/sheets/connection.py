import logging

from google.oauth2.service_account import Credentials
from gspread import Client, Spreadsheet, SpreadsheetNotFound

from ..config import Config
from ..errors import ConfigurationError
from ._retry import retry

logger = logging.getLogger(__name__)

SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets',
]


def _connect_service_account(service_account_file: str) -> Client:
    """
    Conecta-se à API do Google Sheets usando um arquivo de conta de serviço.

    Args:
        service_account_file (str): Caminho para o arquivo de conta de serviço JSON.

    Returns:
        Client: Cliente autenticado do gspread.

    Raises:
        ConfigurationError: Se o arquivo não existir.
    """
    logger.debug("Conectando à API do Google Sheets usando: %s", service_account_file)
    try:
        credentials = Credentials.from_service_account_file(service_account_file, scopes=SCOPES)
    except FileNotFoundError as e:
        logger.error("Arquivo de conta de serviço não encontrado: %s", service_account_file)
        raise ConfigurationError(
            f"Arquivo de conta de serviço não encontrado: '{service_account_file}' (SERVICE_ACCOUNT_FILE)."
        ) from e
    client = Client(auth=credentials)
    logger.info("Conexão estabelecida com sucesso à API do Google Sheets.")
    return client


def get_spreadsheet(config: Config) -> Spreadsheet:
    """
    Abre a planilha de destino definida na configuração.

    Args:
        config (Config): Configuração com SPREADSHEET_ID e SERVICE_ACCOUNT_FILE.

    Returns:
        Spreadsheet: Objeto da planilha obtida.

    Raises:
        ConfigurationError: Se SPREADSHEET_ID ou SERVICE_ACCOUNT_FILE não estiverem definidos.
        SpreadsheetNotFound: Se a planilha não existir ou não for compartilhada com a conta de serviço.
    """
    spreadsheet_id, service_account_file = config.require_spreadsheet()

    try:
        logger.debug("Obtendo a planilha com ID: %s", spreadsheet_id)
        client = _connect_service_account(service_account_file)
        spreadsheet = retry(lambda: client.open_by_key(spreadsheet_id))
        logger.info("Planilha obtida com sucesso: %s", spreadsheet.title)
        return spreadsheet

    except SpreadsheetNotFound:
        logger.error(
            "Planilha com ID %s não encontrada ou não compartilhada com a conta de serviço.",
            spreadsheet_id,
        )
        raise
