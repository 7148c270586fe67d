"""Testes unitários para o retry das chamadas ao gspread."""

from unittest.mock import Mock

import pytest
from gspread.exceptions import APIError, SpreadsheetNotFound, WorksheetNotFound

from t212.api._retry import RetryPolicy
from t212.sheets._retry import retry


def api_error(status_code: int) -> APIError:
    response = Mock(status_code=status_code)
    response.json.return_value = {"error": {"code": status_code, "message": "erro", "status": "ERROR"}}
    return APIError(response)


def fixed_policy(max_retries: int = 3) -> RetryPolicy:
    rng = Mock()
    rng.uniform.return_value = 0.0
    return RetryPolicy(max_retries=max_retries, rng=rng)


class TestRetry:
    """Testes para a função retry."""

    def test_retry_success_first_attempt(self):
        """Deve retornar sucesso na primeira tentativa."""
        mock_func = Mock(return_value="success")
        sleep = Mock()

        result = retry(mock_func, sleep=sleep)

        assert result == "success"
        assert mock_func.call_count == 1
        sleep.assert_not_called()

    def test_retry_success_after_server_errors(self):
        """Deve retryer 5xx com backoff exponencial e eventualmente ter sucesso."""
        mock_func = Mock(side_effect=[api_error(500), api_error(503), "success"])
        sleep = Mock()

        result = retry(mock_func, policy=fixed_policy(), sleep=sleep)

        assert result == "success"
        assert mock_func.call_count == 3
        assert [call.args[0] for call in sleep.call_args_list] == [1.0, 2.0]

    def test_retry_rate_limit(self):
        """Deve retryer 429 do Google com backoff de 2s."""
        mock_func = Mock(side_effect=[api_error(429), "success"])
        sleep = Mock()

        assert retry(mock_func, policy=fixed_policy(), sleep=sleep) == "success"
        sleep.assert_called_once_with(2.0)

    def test_retry_max_attempts_exceeded(self):
        """Deve falhar após esgotar as tentativas da política."""
        mock_func = Mock(side_effect=api_error(503))

        with pytest.raises(APIError):
            retry(mock_func, policy=fixed_policy(max_retries=2), sleep=Mock())

        assert mock_func.call_count == 3

    def test_no_retry_on_client_error(self):
        """Não deve retryer 4xx do Google (ex: permissão negada)."""
        mock_func = Mock(side_effect=api_error(403))
        sleep = Mock()

        with pytest.raises(APIError):
            retry(mock_func, policy=fixed_policy(), sleep=sleep)

        assert mock_func.call_count == 1
        sleep.assert_not_called()

    def test_no_retry_on_worksheet_not_found(self):
        """Não deve retryer WorksheetNotFound."""
        mock_func = Mock(side_effect=WorksheetNotFound("test_sheet"))

        with pytest.raises(WorksheetNotFound):
            retry(mock_func, sleep=Mock())

        assert mock_func.call_count == 1

    def test_no_retry_on_spreadsheet_not_found(self):
        """Não deve retryer SpreadsheetNotFound."""
        mock_func = Mock(side_effect=SpreadsheetNotFound("test_id"))

        with pytest.raises(SpreadsheetNotFound):
            retry(mock_func, sleep=Mock())

        assert mock_func.call_count == 1

    def test_no_retry_on_value_error(self):
        """Não deve retryer ValueError."""
        mock_func = Mock(side_effect=ValueError("invalid value"))

        with pytest.raises(ValueError):
            retry(mock_func, sleep=Mock())

        assert mock_func.call_count == 1
