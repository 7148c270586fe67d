"""
Exemplo: Demonstração de Error Handling.

Este exemplo mostra como as falhas da API chegam ao chamador como
exceções tipadas e como traduzi-las em mensagens para o usuário.
Nenhuma planilha é necessária: as linhas ficam apenas em memória.
"""

from dotenv import load_dotenv

from t212 import (
    ApiClient,
    ClientRequestError,
    Config,
    ConfigurationError,
    RateLimitExceededError,
    SyncOrchestrator,
    TransientServerError,
    describe_error,
)
from t212.data import InMemoryHeaderStore

# Carrega variáveis de ambiente do .env
load_dotenv()


class PrintingRowSink:
    """Row sink que apenas mostra as primeiras linhas no terminal."""

    def write_rows(self, sheet_name: str, headers: list[str], rows: list[list]) -> None:
        print(f"\n📄 {sheet_name}: {len(rows)} linhas")
        print(f"   {headers}")
        for row in rows[:3]:
            print(f"   {row}")


def main():
    """Função principal."""
    try:
        config = Config()
    except ConfigurationError as e:
        print(f"❌ {describe_error(e, 'Carregando configuração')}")
        return

    client = ApiClient(config, max_wait_seconds=60)
    orchestrator = SyncOrchestrator(
        client,
        row_sink=PrintingRowSink(),
        header_store=InMemoryHeaderStore(),
    )

    try:
        orchestrator.sync_resource("TRANSACTIONS")

    except ClientRequestError as e:
        # 4xx: não adianta repetir (chave inválida, permissão, etc.)
        print(f"❌ {describe_error(e, 'Sincronizando Transactions')}")
        if e.error_code:
            print(f"   Código da API: {e.error_code}")

    except RateLimitExceededError as e:
        print(f"⏸️  {describe_error(e, 'Sincronizando Transactions')} ({e.attempts} tentativas)")

    except TransientServerError as e:
        print(f"🔄 {describe_error(e, 'Sincronizando Transactions')}")

    except ConfigurationError as e:
        # Ex: espera do rate limiter acima de max_wait_seconds
        print(f"⚠️  {describe_error(e, 'Sincronizando Transactions')}")

    finally:
        client.close()


if __name__ == "__main__":
    main()
