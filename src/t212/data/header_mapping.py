"""
Mapeamento entre caminhos da API e nomes de colunas exibidos na planilha.

Um mapeamento armazenado fixa a ordem das colunas de um recurso e preserva
nomes renomeados pelo usuário. Quando a API passa a retornar campos novos,
eles são anexados ao final e reportados como adicionados; campos que sumiram
são reportados como removidos, sem reordenar as colunas existentes.
"""
import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderMapping:
    """
    Associação de um caminho da API a um nome de coluna.

    Attributes:
        original_path (str): Caminho separado por ponto (ex: "amount.value").
        display_name (str): Nome exibido na planilha.
        is_user_override (bool): True se o nome foi definido pelo usuário.
    """
    original_path: str
    display_name: str
    is_user_override: bool = False


@dataclass
class HeaderReconciliation:
    """
    Resultado da reconciliação entre o mapeamento armazenado e os campos observados.

    Attributes:
        mappings (list[HeaderMapping]): Mapeamento efetivo, na ordem das colunas.
        added_fields (list[str]): Caminhos observados que não estavam armazenados.
        removed_fields (list[str]): Caminhos armazenados que não foram observados.
    """
    mappings: list[HeaderMapping]
    added_fields: list[str] = field(default_factory=list)
    removed_fields: list[str] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [mapping.original_path for mapping in self.mappings]

    @property
    def display_names(self) -> list[str]:
        return [mapping.display_name for mapping in self.mappings]

    @property
    def changed(self) -> bool:
        return bool(self.added_fields or self.removed_fields)


def transform_header_name(path: str) -> str:
    """
    Transforma um caminho da API em um nome de coluna legível.

    Exemplos: 'amount.value' -> 'Amount Value', 'dividend_gained' -> 'Dividend Gained'.

    Args:
        path (str): Caminho da API.

    Returns:
        str: Nome em Title Case, ou string vazia se o caminho for inválido.
    """
    if not path or not isinstance(path, str):
        logger.debug("Caminho inválido para transformação de cabeçalho: %r", path)
        return ""
    words = [word for word in re.split(r"[_.\s]+", path) if word]
    return " ".join(word[0].upper() + word[1:].lower() for word in words)


def build_mappings(paths: list[str]) -> list[HeaderMapping]:
    """Gera mapeamentos padrão (sem override) para uma lista de caminhos."""
    return [HeaderMapping(path, transform_header_name(path)) for path in paths]


def reconcile(stored: list[HeaderMapping] | None, observed_paths: list[str]) -> HeaderReconciliation:
    """
    Reconcilia o mapeamento armazenado com os caminhos observados na sincronização atual.

    A ordem e os nomes armazenados são mantidos; caminhos novos vão para o
    final com nome gerado. Caminhos removidos continuam no mapeamento (a
    coluna fica vazia) e são apenas reportados, já que a política de remoção
    é decisão do chamador.

    Args:
        stored (list[HeaderMapping] | None): Mapeamento armazenado, se existir.
        observed_paths (list[str]): Caminhos derivados dos dados atuais.

    Returns:
        HeaderReconciliation: Mapeamento efetivo e conjuntos adicionados/removidos.
    """
    if not stored:
        return HeaderReconciliation(mappings=build_mappings(observed_paths))

    stored_paths = [mapping.original_path for mapping in stored]
    stored_set = set(stored_paths)
    observed_set = set(observed_paths)

    added_fields = [path for path in observed_paths if path not in stored_set]
    removed_fields = [path for path in stored_paths if path not in observed_set]

    mappings = list(stored) + build_mappings(added_fields)

    if added_fields:
        logger.info("Campos novos detectados: %s", ", ".join(added_fields))
    if removed_fields:
        logger.info("Campos removidos detectados: %s", ", ".join(removed_fields))

    return HeaderReconciliation(
        mappings=mappings,
        added_fields=added_fields,
        removed_fields=removed_fields,
    )


class InMemoryHeaderStore:
    """
    Armazenamento de mapeamentos em memória, por chave de recurso.
    """

    def __init__(self, initial: dict[str, list[HeaderMapping]] | None = None):
        self._mappings: dict[str, list[HeaderMapping]] = {
            key: list(value) for key, value in (initial or {}).items()
        }

    def get_stored_headers(self, resource_key: str) -> list[HeaderMapping] | None:
        stored = self._mappings.get(resource_key)
        return list(stored) if stored else None

    def store_headers(self, resource_key: str, mappings: list[HeaderMapping]) -> None:
        self._mappings[resource_key] = list(mappings)

    def rename(self, resource_key: str, original_path: str, display_name: str) -> None:
        """
        Renomeia uma coluna, marcando-a como override do usuário.

        Raises:
            KeyError: Se o recurso ou o caminho não estiverem armazenados.
        """
        mappings = self._mappings[resource_key]
        for index, mapping in enumerate(mappings):
            if mapping.original_path == original_path:
                mappings[index] = HeaderMapping(original_path, display_name, is_user_override=True)
                return
        raise KeyError(original_path)
