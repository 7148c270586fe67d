"""
Hierarquia de exceções do sincronizador.

Toda falha que atravessa a fronteira do ApiClient é uma exceção tipada,
nunca um retorno None. Cada exceção carrega informação estruturada
suficiente (endpoint, status HTTP, tentativas, corpo da resposta) para
que o chamador monte uma mensagem sem precisar interpretar strings.
"""
import json


class T212Error(Exception):
    """
    Exceção base do pacote.

    Attributes:
        endpoint_key (str | None): Chave do endpoint envolvido.
        status_code (int | None): Status HTTP, quando aplicável.
        attempts (int): Número de tentativas realizadas.
        response_body (str): Corpo bruto da resposta, para diagnóstico.
    """

    def __init__(
        self,
        message: str,
        endpoint_key: str | None = None,
        status_code: int | None = None,
        attempts: int = 0,
        response_body: str = "",
    ):
        super().__init__(message)
        self.endpoint_key = endpoint_key
        self.status_code = status_code
        self.attempts = attempts
        self.response_body = response_body


class ConfigurationError(T212Error, ValueError):
    """
    Configuração inválida ou ausente: credencial, endpoint desconhecido,
    ambiente inválido ou espera acima do teto de execução.

    Nunca passa por retry.
    """


class ApiError(T212Error):
    """
    Resposta HTTP que não pôde ser tratada como sucesso.

    Attributes:
        error_code (str): Código de erro da API (campo ``code`` do corpo JSON), se houver.
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.error_code = _parse_error_code(self.response_body)


class RateLimitExceededError(ApiError):
    """HTTP 429 persistente após esgotar o orçamento de retries."""


class TransientServerError(ApiError):
    """5xx ou falha de transporte persistente após esgotar o orçamento de retries."""


class ClientRequestError(ApiError):
    """4xx não-retryável. Levantada já na primeira tentativa."""


class SchemaResolutionError(T212Error):
    """
    Reservada para amostras que não produzem nenhum cabeçalho.

    O flattener prefere retornar lista vazia, já que ausência de dados é um
    estado válido.
    """


def _parse_error_code(response_body: str) -> str:
    """Extrai o campo ``code`` de um corpo JSON de erro, se existir."""
    if not response_body:
        return ""
    try:
        parsed = json.loads(response_body)
    except ValueError:
        return ""
    if isinstance(parsed, dict) and parsed.get("code"):
        return str(parsed["code"])
    return ""


_STATUS_MESSAGES = {
    400: "Há um problema nos parâmetros da requisição. Verifique as configurações.",
    401: "Falha de autenticação: verifique se a chave da API está correta e ativa.",
    403: "Acesso negado: a chave da API não tem permissão para este recurso.",
    404: "Recurso não encontrado. Ele pode ter sido removido.",
    408: "A requisição expirou no servidor. Tente novamente.",
    429: "Limite de requisições excedido. Aguarde alguns instantes e tente novamente.",
}


def describe_error(error: Exception, context: str = "Não foi possível concluir a operação") -> str:
    """
    Traduz uma exceção em uma mensagem legível para o usuário final.

    Args:
        error (Exception): Exceção capturada.
        context (str): Contexto da operação (ex: "Sincronizando Dividends").

    Returns:
        str: Mensagem amigável.
    """
    if isinstance(error, ConfigurationError):
        return f"{context}: erro de configuração. {error}"

    if isinstance(error, ApiError):
        status = error.status_code
        if status in _STATUS_MESSAGES:
            return f"{context}: {_STATUS_MESSAGES[status]}"
        if isinstance(error, TransientServerError) or (status is not None and status >= 500):
            return f"{context}: serviço temporariamente indisponível. Tente novamente em alguns minutos."
        return f"{context}: erro inesperado da API (status {status})."

    message = str(error)
    if len(message) > 100:
        message = message[:100] + "..."
    return f"{context}: erro inesperado. Detalhes: {message}"
