"""
Achatamento de registros JSON aninhados em linhas tabulares.

Os cabeçalhos são caminhos separados por ponto (ex: "amount.value") derivados
de um registro de amostra. Listas são descritas pelo formato do seu
primeiro elemento; elementos posteriores com campos extras têm esses campos
descartados silenciosamente, o que mantém as colunas estáveis entre páginas.

Todas as funções são puras: o mesmo registro com os mesmos cabeçalhos gera
sempre a mesma linha.
"""
import logging
from typing import Any

logger = logging.getLogger(__name__)

LIST_JOIN_DELIMITER = ", "

LIST_MODE_JOIN = "join"
LIST_MODE_SPREAD = "spread"
LIST_MODES = (LIST_MODE_JOIN, LIST_MODE_SPREAD)


def _extract_paths(value: Any, path: str, headers: list[str]) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            child_path = f"{path}.{key}" if path else str(key)
            _extract_paths(child, child_path, headers)
        return

    if isinstance(value, list):
        # Formato do primeiro elemento representa a lista inteira
        first_item = value[0] if value else None
        _extract_paths(first_item, path, headers)
        return

    if path:
        headers.append(path)


def derive_headers(sample: Any, fallback: list[str] | None = None) -> list[str]:
    """
    Deriva a lista ordenada de cabeçalhos a partir de um registro de amostra.

    Percorre o registro em profundidade, na ordem de inserção dos campos:
    objetos aninhados estendem o caminho com ".campo", listas são descritas
    pelo primeiro elemento (mesmo caminho) e valores escalares viram folhas.

    Args:
        sample (Any): Registro de amostra, ou lista de registros (usa o primeiro).
        fallback (list[str] | None): Cabeçalhos usados quando não há amostra utilizável.

    Returns:
        list[str]: Cabeçalhos sem duplicatas. Lista vazia se nem a amostra nem o fallback produzirem nada.
    """
    if isinstance(sample, list):
        sample = sample[0] if sample else None

    if not isinstance(sample, dict) or not sample:
        headers = list(fallback or [])
        if not headers:
            logger.warning("Amostra vazia e sem fallback: nenhum cabeçalho derivado.")
        return headers

    headers: list[str] = []
    _extract_paths(sample, "", headers)

    # dict.fromkeys preserva a ordem da primeira ocorrência
    unique_headers = list(dict.fromkeys(headers))
    if not unique_headers:
        logger.warning("Amostra sem campos escalares; usando fallback.")
        return list(fallback or [])
    return unique_headers


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_object(obj: dict) -> str:
    """
    Junta os valores folha de um objeto em uma única string.

    Args:
        obj (dict): Objeto a achatar.

    Returns:
        str: Valores separados por ", " (None vira string vazia).
    """
    parts = []
    for value in obj.values():
        if isinstance(value, dict):
            parts.append(flatten_object(value))
        elif isinstance(value, list):
            parts.append(LIST_JOIN_DELIMITER.join(
                flatten_object(item) if isinstance(item, dict) else _to_text(item)
                for item in value
            ))
        else:
            parts.append(_to_text(value))
    return LIST_JOIN_DELIMITER.join(parts)


def _resolve(value: Any, keys: list[str], join_lists: bool) -> Any:
    if value is None:
        return ""

    if isinstance(value, list):
        resolved = [_resolve(item, keys, join_lists) for item in value]
        if join_lists:
            return LIST_JOIN_DELIMITER.join(_to_text(item) for item in resolved)
        spread: list = []
        for item in resolved:
            if isinstance(item, list):
                spread.extend(item)
            else:
                spread.append(item)
        return spread

    if not keys:
        if isinstance(value, dict):
            return flatten_object(value)
        return value

    if not isinstance(value, dict):
        return ""

    return _resolve(value.get(keys[0]), keys[1:], join_lists)


def resolve_field(record: Any, path: str, join_lists: bool = True) -> Any:
    """
    Resolve um caminho separado por ponto contra um registro.

    - Campo ausente ou nulo no caminho: string vazia (nunca lança).
    - Lista no caminho: o restante do caminho é resolvido para cada elemento
      e os resultados são juntados com ", " (ou mantidos como lista se
      ``join_lists`` for False).
    - Valor final objeto: achatado em uma string com seus valores folha.

    Args:
        record (Any): Registro JSON.
        path (str): Caminho do cabeçalho.
        join_lists (bool): Junta listas em uma célula; False mantém a lista para espalhamento.

    Returns:
        Any: Valor escalar da célula (ou lista, com join_lists=False).
    """
    return _resolve(record, path.split(".") if path else [], join_lists)


def resolve_row(record: Any, headers: list[str], join_lists: bool = True) -> list:
    """
    Resolve um registro em uma linha alinhada aos cabeçalhos.

    Args:
        record (Any): Registro JSON.
        headers (list[str]): Cabeçalhos da execução.
        join_lists (bool): Ver resolve_field.

    Returns:
        list: Uma célula por cabeçalho, na mesma ordem.
    """
    return [resolve_field(record, header, join_lists) for header in headers]


def spread_row(row: list) -> list:
    """
    Espalha células que ainda são listas em colunas adjacentes.

    Args:
        row (list): Linha possivelmente contendo listas.

    Returns:
        list: Linha achatada.
    """
    spread: list = []
    for cell in row:
        if isinstance(cell, list):
            spread.extend(cell)
        else:
            spread.append(cell)
    return spread


def flatten_records(records: list, headers: list[str], list_mode: str = LIST_MODE_JOIN) -> list[list]:
    """
    Converte registros em linhas usando um único modo de lista para toda a execução.

    Args:
        records (list): Registros JSON.
        headers (list[str]): Cabeçalhos da execução.
        list_mode (str): "join" (listas em uma célula) ou "spread" (listas espalhadas em colunas).

    Returns:
        list[list]: Linhas.

    Raises:
        ValueError: Se o modo de lista for desconhecido.
    """
    if list_mode not in LIST_MODES:
        raise ValueError(f"Modo de lista inválido: '{list_mode}'. Use 'join' ou 'spread'.")

    if list_mode == LIST_MODE_JOIN:
        return [resolve_row(record, headers) for record in records]
    _, rows = spread_records(records, headers)
    return rows


def spread_records(records: list, headers: list[str]) -> tuple[list[int], list[list]]:
    """
    Espalha listas em colunas adjacentes com largura fixa por cabeçalho.

    A largura de cada cabeçalho é o maior número de elementos que a coluna
    teve em qualquer registro (mínimo 1). Células com menos elementos são
    completadas com string vazia, então todas as linhas têm o mesmo tamanho.

    Args:
        records (list): Registros JSON.
        headers (list[str]): Cabeçalhos da execução.

    Returns:
        tuple[list[int], list[list]]: Largura de cada cabeçalho e as linhas espalhadas.
    """
    resolved = [resolve_row(record, headers, join_lists=False) for record in records]

    widths = [1] * len(headers)
    for row in resolved:
        for index, cell in enumerate(row):
            if isinstance(cell, list):
                widths[index] = max(widths[index], len(cell))

    rows = []
    for row in resolved:
        padded = []
        for width, cell in zip(widths, row):
            values = cell if isinstance(cell, list) else [cell]
            padded.append(values + [""] * (width - len(values)))
        rows.append(spread_row(padded))
    return widths, rows


def expand_headers(headers: list[str], widths: list[int]) -> list[str]:
    """
    Repete cada cabeçalho pela sua largura, com sufixo numérico ("Tags 1", "Tags 2").

    Cabeçalhos de largura 1 são mantidos como estão.
    """
    expanded: list[str] = []
    for header, width in zip(headers, widths):
        if width > 1:
            expanded.extend(f"{header} {number}" for number in range(1, width + 1))
        else:
            expanded.append(header)
    return expanded
