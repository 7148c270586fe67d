import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .api.client import ApiClient, cursor_from_path
from .api.endpoints import PIE_ITEMS_KEY, PIE_ITEMS_SHEET_NAME, EndpointDescriptor
from .data.flattener import (
    LIST_MODE_JOIN,
    LIST_MODE_SPREAD,
    LIST_MODES,
    derive_headers,
    expand_headers,
    flatten_records,
    spread_records,
)
from .data.header_mapping import reconcile
from .data.sync_state import SyncState, utc_timestamp

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_EMPTY = "empty"
STATUS_ERROR = "error"
STATUS_INVALID = "invalid"


@dataclass
class SyncResult:
    """
    Resultado da sincronização de um recurso.

    Attributes:
        resource_key (str): Chave do recurso sincronizado.
        headers (list[str]): Caminhos da API usados como colunas.
        display_headers (list[str]): Nomes exibidos na planilha.
        rows (list[list]): Linhas escritas.
        item_count (int): Itens retornados pela API.
        added_fields (list[str]): Campos novos em relação ao mapeamento armazenado.
        removed_fields (list[str]): Campos armazenados ausentes nesta execução.
        last_cursor (str | None): Último cursor de paginação seguido.
        last_updated (str): Horário da sincronização (ISO 8601, UTC).
    """
    resource_key: str
    headers: list[str] = field(default_factory=list)
    display_headers: list[str] = field(default_factory=list)
    rows: list[list] = field(default_factory=list)
    item_count: int = 0
    added_fields: list[str] = field(default_factory=list)
    removed_fields: list[str] = field(default_factory=list)
    last_cursor: str | None = None
    last_updated: str = ""

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0


@dataclass
class ResourceOutcome:
    """Resultado de um recurso dentro de uma sincronização em lote."""
    key: str
    status: str
    result: SyncResult | None = None
    error: str = ""


class SyncOrchestrator:
    """
    Orquestra a sincronização de recursos da API para a planilha.

    Busca todas as páginas, deriva (ou reutiliza) os cabeçalhos uma única vez,
    achata cada item com o mesmo conjunto de cabeçalhos e entrega as linhas
    ao row sink. Erros do cliente são propagados sem tratamento, exceto em
    ``sync_selected``, que isola cada recurso.
    """

    def __init__(
        self,
        api_client: ApiClient,
        row_sink: Any = None,
        header_store: Any = None,
        progress: Callable[[str], None] | None = None,
        list_mode: str = LIST_MODE_JOIN,
        state_store: Any = None,
        now: Callable[[], str] = utc_timestamp,
    ):
        """
        Args:
            api_client (ApiClient): Cliente da API.
            row_sink: Objeto com ``write_rows(sheet_name, headers, rows)``. Opcional.
            header_store: Objeto com ``get_stored_headers``/``store_headers``. Opcional.
            progress (Callable[[str], None] | None): Recebe mensagens de progresso.
            list_mode (str): "join" ou "spread", fixo para todas as execuções.
            state_store: Objeto com ``get_state``/``store_state``. Opcional.
            now (Callable[[], str]): Horário atual em ISO 8601, gravado como "Last Updated".
        """
        if list_mode not in LIST_MODES:
            raise ValueError(f"Modo de lista inválido: '{list_mode}'. Use 'join' ou 'spread'.")

        self.api_client = api_client
        self.row_sink = row_sink
        self.header_store = header_store
        self.progress = progress
        self.list_mode = list_mode
        self.state_store = state_store
        self._now = now

    def _report(self, message: str) -> None:
        logger.debug(message)
        if self.progress is not None:
            self.progress(message)

    def _resolve_descriptor(self, resource: EndpointDescriptor | str) -> EndpointDescriptor:
        if isinstance(resource, EndpointDescriptor):
            self.api_client.register_endpoint(resource)
            return resource
        return self.api_client.descriptor(resource)

    # ==========================================================================
    # Pipeline de escrita
    # ==========================================================================

    def _build_result(
        self,
        resource_key: str,
        sheet_name: str,
        items: list,
        fallback_headers: list[str] | None,
        last_cursor: str | None = None,
    ) -> SyncResult:
        if not items:
            logger.info("Nenhum item retornado para %s; nada a escrever.", resource_key)
            self._report(f"{resource_key}: nenhum item encontrado")
            return self._record_state(SyncResult(resource_key=resource_key, last_cursor=last_cursor))

        observed_paths = derive_headers(items[0], fallback_headers)

        stored = None
        if self.header_store is not None:
            stored = self.header_store.get_stored_headers(resource_key)

        reconciliation = reconcile(stored, observed_paths)
        if self.header_store is not None and (stored is None or reconciliation.changed):
            self.header_store.store_headers(resource_key, reconciliation.mappings)

        headers = reconciliation.paths
        display_headers = reconciliation.display_names
        if self.list_mode == LIST_MODE_SPREAD:
            widths, rows = spread_records(items, headers)
            display_headers = expand_headers(display_headers, widths)
        else:
            rows = flatten_records(items, headers, self.list_mode)

        result = SyncResult(
            resource_key=resource_key,
            headers=headers,
            display_headers=display_headers,
            rows=rows,
            item_count=len(items),
            added_fields=reconciliation.added_fields,
            removed_fields=reconciliation.removed_fields,
            last_cursor=last_cursor,
        )

        if self.row_sink is not None:
            self.row_sink.write_rows(sheet_name, result.display_headers, rows)

        logger.info(
            "%s sincronizado: %d itens, %d colunas (aba '%s').",
            resource_key,
            result.item_count,
            len(headers),
            sheet_name,
        )
        self._report(f"{resource_key}: {result.item_count} itens sincronizados")
        return self._record_state(result)

    def _record_state(self, result: SyncResult) -> SyncResult:
        result.last_updated = self._now()
        if self.state_store is not None:
            self.state_store.store_state(
                SyncState(result.resource_key, result.last_cursor, result.last_updated)
            )
        return result

    # ==========================================================================
    # Operações públicas
    # ==========================================================================

    def sync_resource(
        self,
        resource: EndpointDescriptor | str,
        params: dict | None = None,
        fallback_headers: list[str] | None = None,
    ) -> SyncResult:
        """
        Sincroniza um recurso da API com sua aba.

        Args:
            resource (EndpointDescriptor | str): Descritor ou chave do endpoint.
            params (dict | None): Parâmetros da primeira página. Padrão: parâmetros do descritor.
            fallback_headers (list[str] | None): Cabeçalhos usados se o primeiro item não tiver campos.

        Returns:
            SyncResult: Resultado da sincronização (vazio se a API não retornou itens).
        """
        descriptor = self._resolve_descriptor(resource)
        if params is None:
            params = dict(descriptor.default_params)

        self._report(f"{descriptor.key}: buscando dados...")

        cursors: list[str] = []

        def on_page(page_number: int, item_count: int) -> None:
            self._report(f"{descriptor.key}: página {page_number} recebida ({item_count} itens)")

        items = self.api_client.fetch_all_pages(
            descriptor.key, descriptor.path, params=params, on_page=on_page, on_cursor=cursors.append
        )
        last_cursor = cursor_from_path(cursors[-1]) if cursors else None
        return self._build_result(
            descriptor.key, descriptor.sheet_name, items, fallback_headers, last_cursor
        )

    def sync_pie_items(self) -> SyncResult:
        """
        Sincroniza os instrumentos de todas as pies em uma única aba.

        Cada instrumento recebe o campo "pieId" como primeira coluna.

        Returns:
            SyncResult: Resultado da sincronização da aba PieItems.
        """
        self._report(f"{PIE_ITEMS_KEY}: buscando pies...")
        pies = self.api_client.get_pies()

        items: list[dict] = []
        for index, pie in enumerate(pies, start=1):
            pie_id = pie.get("id") if isinstance(pie, dict) else None
            if pie_id is None:
                logger.warning("Pie sem ID ignorada: %r", pie)
                continue

            details = self.api_client.get_pie_details(pie_id)
            instruments = details.get("instruments") if isinstance(details, dict) else None
            for instrument in instruments or []:
                items.append({"pieId": pie_id, **instrument})

            self._report(f"{PIE_ITEMS_KEY}: pie {index}/{len(pies)} processada ({len(items)} itens)")

        return self._build_result(PIE_ITEMS_KEY, PIE_ITEMS_SHEET_NAME, items, None)

    def sync_selected(self, keys: list[str]) -> list[ResourceOutcome]:
        """
        Sincroniza vários recursos, isolando falhas por recurso.

        Args:
            keys (list[str]): Chaves dos recursos (endpoints ou PIE_ITEMS).

        Returns:
            list[ResourceOutcome]: Um resultado por chave, na ordem recebida.

        Raises:
            ValueError: Se nenhuma chave for informada.
        """
        if not keys:
            raise ValueError("Nenhum recurso selecionado para sincronização.")

        outcomes: list[ResourceOutcome] = []

        for key in keys:
            if key != PIE_ITEMS_KEY and key not in self.api_client.endpoints:
                logger.warning("Recurso desconhecido ignorado: %s", key)
                outcomes.append(
                    ResourceOutcome(key=key, status=STATUS_INVALID, error=f"Recurso desconhecido: {key}")
                )
                continue

            try:
                if key == PIE_ITEMS_KEY:
                    result = self.sync_pie_items()
                else:
                    result = self.sync_resource(key)
            except Exception as e:
                logger.error("Erro ao sincronizar %s: %s", key, e)
                outcomes.append(ResourceOutcome(key=key, status=STATUS_ERROR, error=str(e)))
                continue

            status = STATUS_EMPTY if result.is_empty else STATUS_SUCCESS
            outcomes.append(ResourceOutcome(key=key, status=status, result=result))

        succeeded = sum(1 for outcome in outcomes if outcome.status == STATUS_SUCCESS)
        logger.info("Sincronização em lote concluída: %d/%d recursos com dados.", succeeded, len(outcomes))
        return outcomes
