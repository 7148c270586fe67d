"""
Transformação dos dados da API em linhas de planilha.

Módulos:
    - flattener: Derivação de cabeçalhos e resolução de linhas
    - header_mapping: Mapeamento de caminhos para nomes de colunas
    - sync_state: Último cursor e horário de sincronização por recurso
"""

from .flattener import (
    LIST_MODE_JOIN,
    LIST_MODE_SPREAD,
    derive_headers,
    expand_headers,
    flatten_object,
    flatten_records,
    resolve_field,
    resolve_row,
    spread_records,
    spread_row,
)
from .header_mapping import (
    HeaderMapping,
    HeaderReconciliation,
    InMemoryHeaderStore,
    build_mappings,
    reconcile,
    transform_header_name,
)
from .sync_state import InMemorySyncStateStore, SyncState, utc_timestamp

__all__ = [
    "LIST_MODE_JOIN",
    "LIST_MODE_SPREAD",
    "derive_headers",
    "expand_headers",
    "flatten_object",
    "flatten_records",
    "resolve_field",
    "resolve_row",
    "spread_records",
    "spread_row",
    "HeaderMapping",
    "HeaderReconciliation",
    "InMemoryHeaderStore",
    "build_mappings",
    "reconcile",
    "transform_header_name",
    "InMemorySyncStateStore",
    "SyncState",
    "utc_timestamp",
]
