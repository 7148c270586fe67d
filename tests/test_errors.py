"""Testes unitários para o módulo errors."""

from t212.errors import (
    ApiError,
    ClientRequestError,
    ConfigurationError,
    TransientServerError,
    describe_error,
)


class TestApiError:
    """Testes para ApiError."""

    def test_parses_error_code_from_body(self):
        """Deve extrair o campo 'code' do corpo JSON."""
        error = ApiError("falhou", status_code=400, response_body='{"code": "InvalidPayload"}')

        assert error.error_code == "InvalidPayload"
        assert error.status_code == 400

    def test_non_json_body(self):
        """Corpo não-JSON não deve gerar código de erro."""
        error = ApiError("falhou", response_body="<html>erro</html>")

        assert error.error_code == ""

    def test_structured_attributes(self):
        """Deve guardar endpoint e tentativas."""
        error = TransientServerError("falhou", endpoint_key="PIES", status_code=503, attempts=4)

        assert error.endpoint_key == "PIES"
        assert error.attempts == 4
        assert isinstance(error, ApiError)


class TestDescribeError:
    """Testes para describe_error."""

    def test_authentication_failure(self):
        """401 deve orientar a verificar a chave da API."""
        message = describe_error(ClientRequestError("x", status_code=401), "Sincronizando Pies")

        assert message.startswith("Sincronizando Pies:")
        assert "chave da API" in message

    def test_server_error(self):
        """5xx deve indicar indisponibilidade temporária."""
        message = describe_error(TransientServerError("x", status_code=502))

        assert "temporariamente indisponível" in message

    def test_transport_failure_without_status(self):
        """Falha de transporte sem status também é temporária."""
        message = describe_error(TransientServerError("x"))

        assert "temporariamente indisponível" in message

    def test_configuration_error(self):
        """Erro de configuração deve incluir a mensagem original."""
        message = describe_error(ConfigurationError("SPREADSHEET_ID ausente"))

        assert "erro de configuração" in message
        assert "SPREADSHEET_ID ausente" in message

    def test_unexpected_error_is_truncated(self):
        """Mensagens longas de erros genéricos devem ser truncadas."""
        message = describe_error(RuntimeError("x" * 300))

        assert message.endswith("...")
        assert len(message) < 200
