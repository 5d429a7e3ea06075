"""
Structural queries over symbols and the type references on their ports.

Pure functions: callers pass a snapshot of symbols (usually repository.list()).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from symgraph.helpers.dto.symbol_dto import ComponentQuery, ComponentSymbol, SymbolStatus, TypeReference
from symgraph.helpers.symbol_match_helper import matches_query


def iter_type_ids(ref: TypeReference) -> Iterator[str]:
    """Yield the symbol id of a reference followed by its generic arguments, depth first."""
    yield ref.symbol_id
    for generic in ref.generics:
        yield from iter_type_ids(generic)


def referenced_type_ids(symbol: ComponentSymbol) -> list[str]:
    """Deduplicated symbol ids referenced by a symbol's ports, in first-seen order."""
    seen: dict[str, None] = {}
    for port in symbol.ports:
        for type_id in iter_type_ids(port.type):
            seen.setdefault(type_id, None)
    return list(seen)


def references_symbol(symbol: ComponentSymbol, target_id: str) -> bool:
    return any(target_id in iter_type_ids(port.type) for port in symbol.ports)


def find_dependents(target_id: str, symbols: Iterable[ComponentSymbol]) -> list[ComponentSymbol]:
    """Symbols with at least one port whose type mentions target_id at any nesting depth."""
    return [s for s in symbols if references_symbol(s, target_id)]


def filter_by_query(symbols: Iterable[ComponentSymbol], query: ComponentQuery) -> list[ComponentSymbol]:
    return [s for s in symbols if matches_query(s, query)]


def filter_untested(symbols: Iterable[ComponentSymbol]) -> list[ComponentSymbol]:
    return [s for s in symbols if s.status not in (SymbolStatus.TESTED, SymbolStatus.EXECUTED)]
