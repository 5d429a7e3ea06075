"""Symbol table service - registration, lookup and structural queries.

Owns the write rules for symbols (kind/level pairing, derived ids, unique
ports, containment forest) and raises typed SymbolGraphError subclasses
when they are violated. Read-only queries delegate to the repository and
to the symbol components.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from symgraph.components.symbol.symbol_id_comp import build_symbol_id
from symgraph.components.symbol.symbol_query_comp import (
    filter_by_query,
    filter_untested,
    find_dependents,
    referenced_type_ids,
)
from symgraph.components.symbol.symbol_validator_comp import (
    check_new_symbol,
    check_updated_symbol,
    validate_symbol_by_id,
    validate_symbol_table,
)
from symgraph.components.symbol.version_resolver_comp import (
    format_semver,
    parse_constraint,
    parse_semver,
    satisfies,
    sort_versions_asc,
    sort_versions_desc,
)
from symgraph.helpers.dto.connection_dto import ValidationResult
from symgraph.helpers.dto.symbol_dto import (
    KIND_TO_LEVEL,
    AbstractionLevel,
    ComponentKind,
    ComponentQuery,
    ComponentSymbol,
    ImportSymbolsResult,
    SemVer,
    StatusInfo,
    SymbolOrigin,
    SymbolStatus,
)
from symgraph.helpers.exceptions import InvalidConstraintError, NotFoundError, ValidationFailedError
from symgraph.helpers.symbol_codec_helper import symbol_from_dict, symbol_to_dict
from symgraph.helpers.time_helper import now_ms
from symgraph.persistence.symbol_repository import SymbolRepository

logger = logging.getLogger(__name__)

# Fields that define a symbol's identity; update() refuses to change them
IDENTITY_FIELDS = frozenset({"id", "name", "namespace", "version", "created_at"})
_SYMBOL_FIELDS = frozenset(f.name for f in dataclasses.fields(ComponentSymbol))


class SymbolTableService:
    """Registry of component symbols backed by a SymbolRepository."""

    def __init__(self, repo: SymbolRepository):
        self.repo = repo

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def register(self, symbol: ComponentSymbol) -> ComponentSymbol:
        """
        Register a new symbol.

        Timestamps left at 0 are filled with the current time.

        Returns:
            The stored symbol

        Raises:
            ValidationFailedError: If the symbol breaks a symbol-table rule
        """
        errors = check_new_symbol(symbol, self.repo)
        if errors:
            raise ValidationFailedError(f"Invalid symbol '{symbol.id}': {'; '.join(errors)}", errors)

        now = now_ms()
        created_at = symbol.created_at or now
        stored = dataclasses.replace(symbol, created_at=created_at, updated_at=symbol.updated_at or created_at)
        try:
            self.repo.insert(stored)
        except KeyError as e:
            # Lost a race with a concurrent registration of the same id
            raise ValidationFailedError(f"Symbol '{symbol.id}' is already registered") from e

        logger.info(f"[symbol_table] Registered {stored.id} ({stored.kind.value}, {stored.level.value})")
        return stored

    def register_new(
        self,
        name: str,
        kind: ComponentKind,
        version: SemVer | str,
        namespace: str = "",
        level: AbstractionLevel | None = None,
        **fields: Any,
    ) -> ComponentSymbol:
        """
        Build a symbol with its derived id and level, then register it.

        Args:
            name: Symbol name
            kind: Component kind; the level defaults to the kind's level
            version: SemVer or version string
            namespace: '/'-joined namespace path
            level: Explicit level (validated against the kind)
            **fields: Any other ComponentSymbol field (ports, tags, ...)

        Raises:
            ValidationFailedError: If the version is malformed or validation fails
        """
        if isinstance(version, str):
            parsed = parse_semver(version)
            if parsed is None:
                raise ValidationFailedError(f"Invalid version '{version}'")
            version = parsed

        unknown = set(fields) - _SYMBOL_FIELDS
        if unknown:
            raise ValidationFailedError(f"Unknown symbol field(s): {', '.join(sorted(unknown))}")

        symbol = ComponentSymbol(
            id=build_symbol_id(namespace, name, version),
            name=name,
            namespace=namespace,
            level=level or KIND_TO_LEVEL[kind],
            kind=kind,
            version=version,
            **fields,
        )
        return self.register(symbol)

    def get(self, symbol_id: str) -> ComponentSymbol | None:
        return self.repo.find(symbol_id)

    def require(self, symbol_id: str) -> ComponentSymbol:
        """Like get() but raises NotFoundError when absent."""
        symbol = self.repo.find(symbol_id)
        if symbol is None:
            raise NotFoundError(f"Symbol not found: {symbol_id}")
        return symbol

    def update(self, symbol_id: str, changes: dict[str, Any]) -> ComponentSymbol:
        """
        Apply a partial update.

        Raises:
            NotFoundError: If the symbol does not exist
            ValidationFailedError: If an identity field would change, a field
                is unknown, or the updated symbol breaks a rule
        """
        existing = self.require(symbol_id)

        unknown = set(changes) - _SYMBOL_FIELDS
        if unknown:
            raise ValidationFailedError(f"Unknown symbol field(s): {', '.join(sorted(unknown))}")

        locked = sorted(k for k in changes if k in IDENTITY_FIELDS and changes[k] != getattr(existing, k))
        if locked:
            raise ValidationFailedError(f"Cannot change identity field(s) of '{symbol_id}': {', '.join(locked)}")

        updated = dataclasses.replace(existing, **changes)
        if "updated_at" not in changes:
            updated.updated_at = now_ms()

        errors = check_updated_symbol(updated, self.repo)
        if errors:
            raise ValidationFailedError(f"Invalid update for '{symbol_id}': {'; '.join(errors)}", errors)

        try:
            self.repo.update(updated)
        except KeyError as e:
            raise NotFoundError(f"Symbol not found: {symbol_id}") from e
        logger.debug(f"[symbol_table] Updated {symbol_id}: {sorted(changes)}")
        return updated

    def remove(self, symbol_id: str) -> bool:
        """Delete a symbol; its connections and containment links go with it."""
        removed = self.repo.delete(symbol_id)
        if removed:
            logger.info(f"[symbol_table] Removed {symbol_id}")
        return removed

    def list(self) -> list[ComponentSymbol]:
        return self.repo.list()

    # ------------------------------------------------------------------
    # Finders
    # ------------------------------------------------------------------
    def find_by_namespace(self, namespace: str) -> list[ComponentSymbol]:
        return self.repo.find_by_namespace(namespace)

    def find_by_level(self, level: AbstractionLevel) -> list[ComponentSymbol]:
        return self.repo.find_by_level(level)

    def find_by_kind(self, kind: ComponentKind) -> list[ComponentSymbol]:
        return self.repo.find_by_kind(kind)

    def find_by_tag(self, tag: str) -> list[ComponentSymbol]:
        return self.repo.find_by_tag(tag)

    def find_by_status(self, status: SymbolStatus) -> list[ComponentSymbol]:
        return self.repo.find_by_status(status)

    def find_by_origin(self, origin: SymbolOrigin) -> list[ComponentSymbol]:
        return self.repo.find_by_origin(origin)

    def search(self, text: str) -> list[ComponentSymbol]:
        return self.repo.search(text)

    def query(self, query: ComponentQuery) -> list[ComponentSymbol]:
        """All symbols matching every filter set on the query."""
        candidates = self.repo.find_by_namespace(query.namespace) if query.namespace is not None else self.repo.list()
        return filter_by_query(candidates, query)

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------
    def _versions_of(self, namespace: str, name: str) -> list[ComponentSymbol]:
        return [s for s in self.repo.find_by_namespace(namespace) if s.name == name]

    def get_versions(self, namespace: str, name: str) -> list[SemVer]:
        """Registered versions of namespace/name, newest first."""
        return sort_versions_desc(s.version for s in self._versions_of(namespace, name))

    def get_latest(self, namespace: str, name: str) -> ComponentSymbol | None:
        return self.resolve(namespace, name)

    def resolve(
        self,
        namespace: str,
        name: str,
        constraint: str | None = None,
        prefer_latest: bool = True,
    ) -> ComponentSymbol | None:
        """
        Pick the registered version of namespace/name that satisfies a constraint.

        Args:
            constraint: Version constraint (^1.2.0, ~1.2.0, 1.2.3, *, ...); None means any
            prefer_latest: Return the highest match, otherwise the lowest

        Returns:
            Matching symbol or None if no version qualifies

        Raises:
            InvalidConstraintError: If the constraint cannot be parsed
        """
        candidates = self._versions_of(namespace, name)
        if constraint is not None:
            version_range = parse_constraint(constraint)
            if version_range is None:
                raise InvalidConstraintError(f"Invalid version constraint: {constraint}")
            candidates = [s for s in candidates if satisfies(s.version, version_range)]
        if not candidates:
            return None

        by_version = {format_semver(s.version): s for s in candidates}
        ordered = (sort_versions_desc if prefer_latest else sort_versions_asc)(s.version for s in candidates)
        return by_version[format_semver(ordered[0])]

    # ------------------------------------------------------------------
    # Containment and structure
    # ------------------------------------------------------------------
    def get_contains(self, symbol_id: str) -> list[ComponentSymbol]:
        children = (self.repo.find(cid) for cid in self.repo.find_contains(symbol_id))
        return [c for c in children if c is not None]

    def get_contained_by(self, symbol_id: str) -> ComponentSymbol | None:
        parent_id = self.repo.find_contained_by(symbol_id)
        return self.repo.find(parent_id) if parent_id is not None else None

    def get_dependents(self, symbol_id: str) -> list[ComponentSymbol]:
        """Symbols whose port types reference symbol_id directly or in a generic argument."""
        return find_dependents(symbol_id, self.repo.list())

    def get_dependencies(self, symbol_id: str) -> list[str]:
        """Deduplicated ids referenced by the symbol's own ports; empty if the symbol is unknown."""
        symbol = self.repo.find(symbol_id)
        return referenced_type_ids(symbol) if symbol is not None else []

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    def find_unreachable(self) -> list[ComponentSymbol]:
        """Symbols still in the `declared` status (nothing references them)."""
        return self.repo.find_by_status(SymbolStatus.DECLARED)

    def find_untested(self) -> list[ComponentSymbol]:
        return filter_untested(self.repo.list())

    def find_generated(self) -> list[ComponentSymbol]:
        return self.repo.find_by_origin(SymbolOrigin.GENERATED)

    def find_manual(self) -> list[ComponentSymbol]:
        return self.repo.find_by_origin(SymbolOrigin.MANUAL)

    def update_status(
        self,
        symbol_id: str,
        status: SymbolStatus,
        source: str,
        referenced_by: list[str] | None = None,
        tested_by: list[str] | None = None,
    ) -> ComponentSymbol:
        """
        Record a new usage status with its provenance.

        referenced_by / tested_by are merged into the existing lists.

        Raises:
            NotFoundError: If the symbol does not exist
        """
        existing = self.require(symbol_id)
        previous = existing.status_info
        now = now_ms()
        info = StatusInfo(
            updated_at=now,
            source=source,
            referenced_by=list(dict.fromkeys([*(previous.referenced_by if previous else []), *(referenced_by or [])])),
            tested_by=list(dict.fromkeys([*(previous.tested_by if previous else []), *(tested_by or [])])),
        )
        updated = dataclasses.replace(existing, status=status, status_info=info, updated_at=now)
        self.repo.update(updated)
        logger.debug(f"[symbol_table] Status of {symbol_id}: {existing.status.value} -> {status.value} ({source})")
        return updated

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate(self) -> ValidationResult:
        return validate_symbol_table(self.repo)

    def validate_symbol(self, symbol_id: str) -> ValidationResult:
        return validate_symbol_by_id(symbol_id, self.repo)

    # ------------------------------------------------------------------
    # Bulk import/export
    # ------------------------------------------------------------------
    def export_symbols(self) -> list[dict[str, Any]]:
        return [symbol_to_dict(s) for s in self.repo.list()]

    def import_symbols(self, data: list[dict[str, Any]], skip_existing: bool = True) -> ImportSymbolsResult:
        """
        Register symbols from dicts produced by export_symbols.

        Children are registered before the parents that contain them: the
        import retries pending symbols until a pass makes no progress.

        Args:
            data: Encoded symbols
            skip_existing: Skip ids that are already registered instead of reporting errors
        """
        result = ImportSymbolsResult()
        pending: list[ComponentSymbol] = []

        for item in data:
            try:
                pending.append(symbol_from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                result.errors.append(f"Cannot decode symbol {item.get('id', '<unknown>')}: {e}")

        last_errors: dict[str, str] = {}
        while pending:
            remaining: list[ComponentSymbol] = []
            for symbol in pending:
                if skip_existing and self.repo.find(symbol.id) is not None:
                    result.skipped.append(symbol.id)
                    continue
                try:
                    self.register(symbol)
                    result.imported.append(symbol.id)
                except ValidationFailedError as e:
                    last_errors[symbol.id] = e.message
                    remaining.append(symbol)
            if len(remaining) == len(pending):
                result.errors.extend(last_errors[s.id] for s in remaining)
                break
            pending = remaining

        logger.info(
            f"[symbol_table] Import finished: {len(result.imported)} imported, "
            f"{len(result.skipped)} skipped, {len(result.errors)} failed"
        )
        return result
