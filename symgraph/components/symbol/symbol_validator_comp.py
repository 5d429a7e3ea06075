"""
Symbol table integrity checks.

Two families of checks:
- Write-time checks (check_new_symbol / check_updated_symbol) return error
  strings; the symbol table service raises ValidationFailedError with them.
- Whole-table checks (validate_symbol_table / validate_symbol_by_id) return a
  ValidationResult describing dangling references and containment cycles.
"""

from __future__ import annotations

import logging

from symgraph.components.symbol.symbol_id_comp import build_symbol_id
from symgraph.components.symbol.symbol_query_comp import referenced_type_ids
from symgraph.helpers.dto.connection_dto import ValidationIssue, ValidationResult
from symgraph.helpers.dto.symbol_dto import KIND_TO_LEVEL, ComponentSymbol
from symgraph.persistence.symbol_repository import SymbolRepository

logger = logging.getLogger(__name__)

# Issue codes used in ValidationResult
INVALID_SYMBOL = "INVALID_SYMBOL"
INVALID_CONTAINMENT_REFERENCE = "INVALID_CONTAINMENT_REFERENCE"
UNKNOWN_TYPE_REFERENCE = "UNKNOWN_TYPE_REFERENCE"
CIRCULAR_CONTAINMENT = "CIRCULAR_CONTAINMENT"
SYMBOL_NOT_FOUND = "SYMBOL_NOT_FOUND"


# ----------------------------------------------------------------------
#  Write-time checks
# ----------------------------------------------------------------------
def check_symbol_shape(symbol: ComponentSymbol) -> list[str]:
    """Checks that need nothing but the symbol itself."""
    errors: list[str] = []

    if not symbol.name:
        errors.append("Symbol name must not be empty")
    elif "/" in symbol.name or "@" in symbol.name:
        errors.append(f"Symbol name '{symbol.name}' must not contain '/' or '@'")

    expected_level = KIND_TO_LEVEL[symbol.kind]
    if symbol.level != expected_level:
        errors.append(
            f"Kind '{symbol.kind.value}' requires level {expected_level.value}, got {symbol.level.value}"
        )

    expected_id = build_symbol_id(symbol.namespace, symbol.name, symbol.version)
    if symbol.id != expected_id:
        errors.append(f"Symbol id '{symbol.id}' does not match derived id '{expected_id}'")

    seen: set[str] = set()
    for port in symbol.ports:
        if port.name in seen:
            errors.append(f"Duplicate port name '{port.name}'")
        seen.add(port.name)

    return errors


def _ancestors(symbol_id: str, repo: SymbolRepository) -> list[str]:
    chain: list[str] = []
    current = repo.find_contained_by(symbol_id)
    while current is not None and current not in chain:
        chain.append(current)
        current = repo.find_contained_by(current)
    return chain


def check_containment(symbol: ComponentSymbol, repo: SymbolRepository) -> list[str]:
    """
    Check that the symbol's children keep containment a forest.

    Each child must exist, must not be the symbol itself, must not belong to
    a different parent and must not be an ancestor of the symbol.
    """
    errors: list[str] = []
    ancestors = set(_ancestors(symbol.id, repo))
    seen: set[str] = set()

    for child_id in symbol.contains:
        if child_id in seen:
            errors.append(f"Child '{child_id}' listed more than once")
            continue
        seen.add(child_id)

        if child_id == symbol.id:
            errors.append(f"Symbol '{symbol.id}' cannot contain itself")
            continue
        if repo.find(child_id) is None:
            errors.append(f"Contained symbol '{child_id}' does not exist")
            continue

        parent = repo.find_contained_by(child_id)
        if parent is not None and parent != symbol.id:
            errors.append(f"Symbol '{child_id}' is already contained by '{parent}'")
        if child_id in ancestors:
            errors.append(f"Containing '{child_id}' would create a containment cycle")

    return errors


def check_new_symbol(symbol: ComponentSymbol, repo: SymbolRepository) -> list[str]:
    errors = check_symbol_shape(symbol)
    if repo.find(symbol.id) is not None:
        errors.append(f"Symbol '{symbol.id}' is already registered")
    errors.extend(check_containment(symbol, repo))
    return errors


def check_updated_symbol(symbol: ComponentSymbol, repo: SymbolRepository) -> list[str]:
    return check_symbol_shape(symbol) + check_containment(symbol, repo)


# ----------------------------------------------------------------------
#  Whole-table checks
# ----------------------------------------------------------------------
def _reference_issues(symbol: ComponentSymbol, known: set[str], result: ValidationResult) -> None:
    for child_id in symbol.contains:
        if child_id not in known:
            result.errors.append(
                ValidationIssue(
                    code=INVALID_CONTAINMENT_REFERENCE,
                    message=f"Symbol '{symbol.id}' contains unknown symbol '{child_id}'",
                    symbol_ids=[symbol.id, child_id],
                )
            )

    # Port types may name external or built-in types that are never registered
    for type_id in referenced_type_ids(symbol):
        if type_id not in known:
            result.warnings.append(
                ValidationIssue(
                    code=UNKNOWN_TYPE_REFERENCE,
                    message=f"Symbol '{symbol.id}' references unregistered type '{type_id}'",
                    symbol_ids=[symbol.id],
                    severity="warning",
                )
            )


def find_containment_cycles(repo: SymbolRepository) -> list[list[str]]:
    """
    Depth-first search over containment links.

    Returns:
        Cycles as id lists where the last element contains the first
    """
    cycles: list[list[str]] = []
    visited: set[str] = set()

    for symbol in repo.list():
        if symbol.id in visited:
            continue
        # Iterative DFS: (node, child iterator); `path` mirrors the stack
        path: list[str] = [symbol.id]
        on_path = {symbol.id}
        stack = [iter(repo.find_contains(symbol.id))]
        visited.add(symbol.id)
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                on_path.discard(path.pop())
                continue
            if child in on_path:
                cycles.append(path[path.index(child) :])
                continue
            if child in visited:
                continue
            visited.add(child)
            path.append(child)
            on_path.add(child)
            stack.append(iter(repo.find_contains(child)))

    return cycles


def validate_symbol_table(repo: SymbolRepository) -> ValidationResult:
    """Validate every symbol: shape, dangling references and containment cycles."""
    result = ValidationResult()
    symbols = repo.list()
    known = {s.id for s in symbols}

    for symbol in symbols:
        for message in check_symbol_shape(symbol):
            result.errors.append(ValidationIssue(code=INVALID_SYMBOL, message=message, symbol_ids=[symbol.id]))
        _reference_issues(symbol, known, result)

    for cycle in find_containment_cycles(repo):
        result.errors.append(
            ValidationIssue(
                code=CIRCULAR_CONTAINMENT,
                message=f"Circular containment detected: {' -> '.join([*cycle, cycle[0]])}",
                symbol_ids=cycle,
            )
        )

    result.valid = not result.errors
    if not result.valid:
        logger.info(f"[symbol_validator] Table validation found {len(result.errors)} error(s)")
    return result


def validate_symbol_by_id(symbol_id: str, repo: SymbolRepository) -> ValidationResult:
    """Validate one symbol using direct lookups instead of a full table scan."""
    result = ValidationResult()
    symbol = repo.find(symbol_id)
    if symbol is None:
        result.errors.append(
            ValidationIssue(code=SYMBOL_NOT_FOUND, message=f"Symbol '{symbol_id}' not found", symbol_ids=[symbol_id])
        )
        result.valid = False
        return result

    for message in check_symbol_shape(symbol):
        result.errors.append(ValidationIssue(code=INVALID_SYMBOL, message=message, symbol_ids=[symbol.id]))

    known = {ref for ref in [*symbol.contains, *referenced_type_ids(symbol)] if repo.find(ref) is not None}
    _reference_issues(symbol, known, result)

    result.valid = not result.errors
    return result
