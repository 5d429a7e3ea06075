"""
Predicate helpers for filtering symbols.

Shared by the in-memory repository and the symbol query component so that
every repository searches the same way.

Rules:
- Import only stdlib and symgraph.helpers.dto
- Pure functions, no I/O
"""

from __future__ import annotations

from symgraph.helpers.dto.symbol_dto import ComponentQuery, ComponentSymbol


def matches_search(symbol: ComponentSymbol, text: str) -> bool:
    """Case-insensitive substring match over name, namespace, description and tags."""
    needle = text.lower()
    haystack = [symbol.name, symbol.namespace, symbol.description, *symbol.tags]
    return any(needle in value.lower() for value in haystack)


def matches_query(symbol: ComponentSymbol, query: ComponentQuery) -> bool:
    """Every filter set on the query must match."""
    if query.namespace is not None and symbol.namespace != query.namespace:
        return False
    if query.level is not None and symbol.level != query.level:
        return False
    if query.kind is not None and symbol.kind != query.kind:
        return False
    if query.language is not None and symbol.language != query.language:
        return False
    if query.status is not None and symbol.status != query.status:
        return False
    if query.origin is not None and symbol.origin != query.origin:
        return False
    if query.tag is not None and query.tag not in symbol.tags:
        return False
    return not (query.search and not matches_search(symbol, query.search))
