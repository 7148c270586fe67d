"""Testes unitários para a RetryPolicy."""

import random
from unittest.mock import Mock

import pytest

from t212.api._retry import RetryPolicy, is_retryable
from t212.api.endpoints import RateLimit
from t212.api.rate_limiter import RateLimiter


def _fixed_rng(value: float = 0.5) -> Mock:
    rng = Mock(spec=random.Random)
    rng.uniform.return_value = value
    return rng


class TestIsRetryable:
    """Testes para is_retryable."""

    def test_retryable_outcomes(self):
        """429, 5xx, timeout e erro de conexão passam por retry."""
        for outcome in (429, 500, 502, 503, 504, 599, "timeout", "connection"):
            assert is_retryable(outcome)

    def test_non_retryable_outcomes(self):
        """Demais 4xx e falhas de transporte desconhecidas não passam por retry."""
        for outcome in (400, 401, 403, 404, 408, "other"):
            assert not is_retryable(outcome)


class TestRetryPolicy:
    """Testes para RetryPolicy.should_retry."""

    def test_client_error_never_retries(self):
        """4xx (exceto 429) nunca deve passar por retry."""
        policy = RetryPolicy(rng=_fixed_rng())

        for status in (400, 401, 403, 404):
            decision = policy.should_retry(status, 0, "PIES")
            assert not decision.retry

    def test_server_error_exponential_backoff(self):
        """5xx deve usar backoff exponencial de 1s."""
        policy = RetryPolicy(rng=_fixed_rng())

        delays = [policy.should_retry(503, attempt, "PIES").delay_seconds for attempt in range(3)]

        assert delays == [1.0, 2.0, 4.0]

    def test_transport_failure_uses_server_backoff(self):
        """Timeout deve seguir o mesmo backoff de 5xx."""
        policy = RetryPolicy(rng=_fixed_rng())

        decision = policy.should_retry("timeout", 1, "PIES")

        assert decision.retry
        assert decision.delay_seconds == 2.0

    def test_rate_limit_with_known_endpoint_limit(self):
        """429 com limite conhecido deve usar intervalo + jitter + componente linear."""
        limiter = RateLimiter({"DIVIDENDS": RateLimit(6, 60.0)})
        policy = RetryPolicy(limiter, rng=_fixed_rng(0.5))

        first = policy.should_retry(429, 0, "DIVIDENDS")
        second = policy.should_retry(429, 1, "DIVIDENDS")

        assert first.retry
        assert first.delay_seconds == pytest.approx(10.5)
        assert second.delay_seconds == pytest.approx(15.5)

    def test_rate_limit_without_known_limit(self):
        """429 sem limite conhecido deve usar backoff exponencial de 2s com jitter."""
        policy = RetryPolicy(RateLimiter({}), rng=_fixed_rng(0.25))

        delays = [policy.should_retry(429, attempt, "UNKNOWN").delay_seconds for attempt in range(3)]

        assert delays == pytest.approx([2.25, 4.25, 8.25])

    def test_jitter_is_bounded(self):
        """Jitter real deve ficar entre 0 e 1 segundo."""
        limiter = RateLimiter({"PIES": RateLimit(1, 30.0)})
        policy = RetryPolicy(limiter, rng=random.Random(42))

        for _ in range(20):
            delay = policy.should_retry(429, 0, "PIES").delay_seconds
            assert 30.0 <= delay <= 31.0

    def test_retry_budget(self):
        """Deve permitir 3 retries (4 tentativas no total) e então parar."""
        policy = RetryPolicy(rng=_fixed_rng())

        assert [policy.should_retry(500, attempt).retry for attempt in range(4)] == [
            True,
            True,
            True,
            False,
        ]
        assert policy.max_attempts == 4

    def test_custom_retry_budget(self):
        """Deve respeitar max_retries personalizado."""
        policy = RetryPolicy(max_retries=1, rng=_fixed_rng())

        assert policy.should_retry(500, 0).retry
        assert not policy.should_retry(500, 1).retry
