"""Testes unitários para o RateLimiter e o catálogo de endpoints."""

import pytest

from t212.api.endpoints import ENDPOINTS, EndpointDescriptor, RateLimit, default_rate_limits
from t212.api.rate_limiter import RateLimiter


class TestRateLimit:
    """Testes para RateLimit."""

    def test_interval_seconds(self):
        """Deve calcular o intervalo médio entre requisições."""
        assert RateLimit(6, 60.0).interval_seconds == 10.0

    def test_invalid_limit_raises_error(self):
        """Deve rejeitar limites não positivos."""
        with pytest.raises(ValueError):
            RateLimit(0, 60.0)
        with pytest.raises(ValueError):
            RateLimit(1, 0)


class TestEndpointCatalog:
    """Testes para o catálogo de endpoints."""

    def test_history_endpoints_are_paginated(self):
        """Endpoints de histórico devem ser paginados com limite 6/60s."""
        for key in ("ORDER_HISTORY", "DIVIDENDS", "TRANSACTIONS"):
            descriptor = ENDPOINTS[key]
            assert descriptor.paginated
            assert descriptor.rate_limit == RateLimit(6, 60.0)

    def test_default_rate_limits_cover_catalog(self):
        """Todos os endpoints do catálogo devem ter limite configurado."""
        limits = default_rate_limits()

        assert set(limits) == set(ENDPOINTS)
        assert limits["ACCOUNT_INFO"] == RateLimit(1, 30.0)
        assert limits["ACCOUNT_CASH"] == RateLimit(1, 2.0)

    def test_default_rate_limits_of_custom_catalog(self):
        """Deve derivar os limites de um catálogo informado, ignorando endpoints sem limite."""
        catalog = {
            "A": EndpointDescriptor("A", "a", "A", RateLimit(2, 10.0)),
            "B": EndpointDescriptor("B", "b", "B"),
        }

        assert default_rate_limits(catalog) == {"A": RateLimit(2, 10.0)}


class TestRateLimiter:
    """Testes para RateLimiter."""

    def test_allows_up_to_limit_within_window(self, clock):
        """Deve permitir exatamente max_requests dentro da janela."""
        limiter = RateLimiter({"EP": RateLimit(3, 10.0)}, clock=clock)

        decisions = [limiter.can_proceed("EP") for _ in range(3)]

        assert all(decision.allowed for decision in decisions)
        denied = limiter.can_proceed("EP")
        assert not denied.allowed
        assert denied.wait_seconds == pytest.approx(10.0)

    def test_sliding_window_scenario(self, clock):
        """6 requisições em 5s devem bloquear a 7ª até a primeira sair da janela."""
        limiter = RateLimiter({"DIVIDENDS": RateLimit(6, 60.0)}, clock=clock)

        for index in range(6):
            assert limiter.can_proceed("DIVIDENDS").allowed
            if index < 5:
                clock.advance(1.0)

        decision = limiter.can_proceed("DIVIDENDS")
        assert not decision.allowed
        assert decision.wait_seconds == pytest.approx(55.0)

        clock.advance(decision.wait_seconds)
        assert limiter.can_proceed("DIVIDENDS").allowed

    def test_denied_request_does_not_change_state(self, clock):
        """Consulta negada não deve registrar timestamp."""
        limiter = RateLimiter({"EP": RateLimit(1, 30.0)}, clock=clock)
        limiter.can_proceed("EP")

        for _ in range(5):
            assert not limiter.can_proceed("EP").allowed

        assert limiter.pending("EP") == 1

    def test_timestamp_expires_at_window_boundary(self, clock):
        """Timestamp com idade igual à janela deve ser descartado."""
        limiter = RateLimiter({"EP": RateLimit(1, 2.0)}, clock=clock)
        limiter.can_proceed("EP")

        clock.advance(2.0)

        assert limiter.can_proceed("EP").allowed

    def test_endpoints_are_independent(self, clock):
        """O log de um endpoint não deve afetar outro."""
        limiter = RateLimiter(
            {"A": RateLimit(1, 30.0), "B": RateLimit(1, 30.0)},
            clock=clock,
        )

        assert limiter.can_proceed("A").allowed
        assert limiter.can_proceed("B").allowed
        assert not limiter.can_proceed("A").allowed

    def test_unknown_endpoint_always_allowed(self, clock):
        """Endpoint sem limite configurado nunca deve ser bloqueado."""
        limiter = RateLimiter({}, clock=clock)

        for _ in range(100):
            assert limiter.can_proceed("UNKNOWN").allowed
        assert limiter.rate_limit_for("UNKNOWN") is None

    def test_reset_single_endpoint(self, clock):
        """Deve limpar apenas o log do endpoint informado."""
        limiter = RateLimiter({"A": RateLimit(1, 30.0), "B": RateLimit(1, 30.0)}, clock=clock)
        limiter.can_proceed("A")
        limiter.can_proceed("B")

        limiter.reset("A")

        assert limiter.can_proceed("A").allowed
        assert not limiter.can_proceed("B").allowed

    def test_reset_all(self, clock):
        """Deve limpar todos os logs."""
        limiter = RateLimiter({"A": RateLimit(1, 30.0)}, clock=clock)
        limiter.can_proceed("A")

        limiter.reset()

        assert limiter.pending("A") == 0

    def test_set_rate_limit_applies_to_new_endpoint(self, clock):
        """Limite definido depois da criação deve valer imediatamente."""
        limiter = RateLimiter(clock=clock)
        assert limiter.can_proceed("CUSTOM").allowed

        limiter.set_rate_limit("CUSTOM", RateLimit(1, 60.0))

        assert limiter.can_proceed("CUSTOM").allowed
        decision = limiter.can_proceed("CUSTOM")
        assert not decision.allowed
        assert decision.wait_seconds == pytest.approx(60.0)

    def test_set_rate_limit_none_removes_limit(self, clock):
        """None deve remover o limite do endpoint."""
        limiter = RateLimiter({"A": RateLimit(1, 30.0)}, clock=clock)
        limiter.can_proceed("A")

        limiter.set_rate_limit("A", None)

        assert limiter.rate_limit_for("A") is None
        assert limiter.can_proceed("A").allowed
