"""
Exemplo básico de uso do T212 G-Sheets Sync.

Este script demonstra como sincronizar alguns recursos da conta da
Trading 212 com abas do Google Sheets.
"""

from dotenv import load_dotenv

from t212 import ApiClient, Config, SyncOrchestrator
from t212.sheets import SheetHeaderStore, SheetRowSink, SheetSyncStateStore, get_spreadsheet

# Carrega variáveis de ambiente do arquivo .env
load_dotenv()


def main():
    """Função principal."""
    # Inicializa configuração
    config = Config()
    client = ApiClient(config)

    print("=" * 60)
    print(f"🚀 Ambiente: {config.environment} ({config.base_url})")
    print(f"📊 Planilha: {config.spreadsheet_id}")
    print("=" * 60)

    # Verifica a chave da API antes de sincronizar
    check = client.test_connection()
    if not check.success:
        print(f"❌ Falha na conexão: {check.error}")
        return

    spreadsheet = get_spreadsheet(config)
    orchestrator = SyncOrchestrator(
        client,
        row_sink=SheetRowSink(spreadsheet),
        header_store=SheetHeaderStore(spreadsheet),
        progress=lambda message: print(f"⏳ {message}"),
        state_store=SheetSyncStateStore(spreadsheet),
    )

    try:
        outcomes = orchestrator.sync_selected(["ACCOUNT_CASH", "PIES", "PIE_ITEMS", "DIVIDENDS"])
    finally:
        client.close()

    print("\n📈 Resumo:")
    for outcome in outcomes:
        if outcome.result is not None:
            result = outcome.result
            print(f"  ✅ {outcome.key}: {outcome.status} ({result.item_count} itens, {result.last_updated})")
        else:
            print(f"  ❌ {outcome.key}: {outcome.status} - {outcome.error}")


if __name__ == "__main__":
    main()
