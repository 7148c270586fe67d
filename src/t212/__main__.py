"""Ponto de entrada para execução do módulo como script."""

import logging
import os
import sys

from .api import ApiClient
from .api.endpoints import ENDPOINTS, PIE_DETAILS, PIE_ITEMS_KEY
from .config import Config
from .errors import describe_error
from .orchestrator import STATUS_ERROR, STATUS_INVALID, SyncOrchestrator
from .sheets import SheetHeaderStore, SheetRowSink, SheetSyncStateStore, get_spreadsheet

USAGE = """Uso:
    python -m t212 check
    python -m t212 sync RECURSO [RECURSO ...]
    python -m t212 sync all

Recursos: {resources}"""

# PIE_DETAILS exige um ID e só é usado internamente por PIE_ITEMS
SYNCABLE_RESOURCES = [key for key in ENDPOINTS if key != PIE_DETAILS.key] + [PIE_ITEMS_KEY]


def _configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _usage() -> str:
    return USAGE.format(resources=", ".join(SYNCABLE_RESOURCES))


def run_check(client: ApiClient) -> int:
    """Testa a conexão com a API e retorna o código de saída."""
    check = client.test_connection()
    if check.success:
        print(f"Conexão com a Trading 212 OK ({client.config.environment}).")
        return 0
    print(f"Falha na conexão: {check.error}", file=sys.stderr)
    return 1


def run_sync(client: ApiClient, config: Config, resources: list[str]) -> int:
    """Sincroniza os recursos informados e retorna o código de saída."""
    if resources == ["all"]:
        resources = list(SYNCABLE_RESOURCES)

    spreadsheet = get_spreadsheet(config)
    orchestrator = SyncOrchestrator(
        client,
        row_sink=SheetRowSink(spreadsheet),
        header_store=SheetHeaderStore(spreadsheet),
        progress=print,
        state_store=SheetSyncStateStore(spreadsheet),
    )

    outcomes = orchestrator.sync_selected([resource.upper() for resource in resources])

    print("\nResumo:")
    for outcome in outcomes:
        if outcome.result is not None:
            print(f"  {outcome.key}: {outcome.status} ({outcome.result.item_count} itens)")
        else:
            print(f"  {outcome.key}: {outcome.status} - {outcome.error}")

    failed = [outcome for outcome in outcomes if outcome.status in (STATUS_ERROR, STATUS_INVALID)]
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> None:
    """Função principal da linha de comando."""
    args = list(sys.argv[1:] if argv is None else argv)
    _configure_logging()

    if not args or args[0] not in ("check", "sync") or (args[0] == "sync" and len(args) < 2):
        print(_usage(), file=sys.stderr)
        sys.exit(2)

    client = None
    try:
        config = Config()
        client = ApiClient(config)

        if args[0] == "check":
            exit_code = run_check(client)
        else:
            exit_code = run_sync(client, config, args[1:])

    except KeyboardInterrupt:
        print("\nSincronização interrompida.")
        sys.exit(130)
    except Exception as e:
        print(f"Erro fatal: {describe_error(e)}", file=sys.stderr)
        sys.exit(1)
    finally:
        if client is not None:
            client.close()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
