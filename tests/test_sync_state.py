"""Testes unitários para o estado de sincronização."""

from datetime import datetime

from t212.data.sync_state import InMemorySyncStateStore, SyncState, utc_timestamp


class TestInMemorySyncStateStore:
    """Testes para InMemorySyncStateStore."""

    def test_missing_resource_returns_none(self):
        """Recurso nunca sincronizado não deve ter estado."""
        assert InMemorySyncStateStore().get_state("DIVIDENDS") is None

    def test_store_replaces_previous_state(self):
        """Novo estado deve substituir o anterior do mesmo recurso."""
        store = InMemorySyncStateStore({"PIES": SyncState("PIES", None, "2024-01-01T00:00:00+00:00")})

        store.store_state(SyncState("DIVIDENDS", "7", "2024-01-02T00:00:00+00:00"))
        store.store_state(SyncState("DIVIDENDS", "3", "2024-01-03T00:00:00+00:00"))

        assert store.get_state("DIVIDENDS") == SyncState("DIVIDENDS", "3", "2024-01-03T00:00:00+00:00")
        assert store.get_state("PIES").last_cursor is None


class TestUtcTimestamp:
    """Testes para utc_timestamp."""

    def test_iso_format_in_utc(self):
        """Deve gerar ISO 8601 com fuso UTC e sem frações de segundo."""
        timestamp = utc_timestamp()

        parsed = datetime.fromisoformat(timestamp)
        assert parsed.utcoffset().total_seconds() == 0
        assert parsed.microsecond == 0
