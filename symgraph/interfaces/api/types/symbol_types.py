"""
Symbol API types.

External contracts for symbol registration and lookup.
These are Pydantic models that transform internal DTOs into API shapes.

Architecture:
- These types are owned by the interface layer
- They transform internal DTOs via .from_dto() classmethods and build
  DTOs from requests via .to_dto()
- Services and lower layers should NOT import from this module
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from typing_extensions import Self

from symgraph.components.symbol.version_resolver_comp import format_semver
from symgraph.helpers.dto.symbol_dto import (
    AbstractionLevel,
    ComponentKind,
    ComponentQuery,
    ComponentSymbol,
    PortDefinition,
    PortDirection,
    SymbolOrigin,
    SymbolStatus,
    TypeReference,
)

# ──────────────────────────────────────────────────────────────────────
# Ports
# ──────────────────────────────────────────────────────────────────────


class TypeReferenceModel(BaseModel):
    symbol_id: str
    version: str | None = None
    generics: list[TypeReferenceModel] = Field(default_factory=list)
    nullable: bool = False

    @classmethod
    def from_dto(cls, ref: TypeReference) -> Self:
        return cls(
            symbol_id=ref.symbol_id,
            version=ref.version,
            generics=[cls.from_dto(g) for g in ref.generics],
            nullable=ref.nullable,
        )

    def to_dto(self) -> TypeReference:
        """Raises ValueError if the reference nests too deeply."""
        return TypeReference(
            symbol_id=self.symbol_id,
            version=self.version,
            generics=tuple(g.to_dto() for g in self.generics),
            nullable=self.nullable,
        )


class PortModel(BaseModel):
    name: str
    direction: PortDirection
    type: TypeReferenceModel
    required: bool = False
    multiple: bool = False
    description: str = ""
    default_value: Any = None

    @classmethod
    def from_dto(cls, port: PortDefinition) -> Self:
        return cls(
            name=port.name,
            direction=port.direction,
            type=TypeReferenceModel.from_dto(port.type),
            required=port.required,
            multiple=port.multiple,
            description=port.description,
            default_value=port.default_value,
        )

    def to_dto(self) -> PortDefinition:
        return PortDefinition(
            name=self.name,
            direction=self.direction,
            type=self.type.to_dto(),
            required=self.required,
            multiple=self.multiple,
            description=self.description,
            default_value=self.default_value,
        )


# ──────────────────────────────────────────────────────────────────────
# Symbols
# ──────────────────────────────────────────────────────────────────────


class SymbolResponse(BaseModel):
    """External view of a ComponentSymbol."""

    id: str
    name: str
    namespace: str
    level: AbstractionLevel
    kind: ComponentKind
    version: str
    language: str
    ports: list[PortModel]
    tags: list[str]
    description: str
    created_at: int
    updated_at: int
    status: SymbolStatus
    origin: SymbolOrigin
    contains: list[str]
    compatible_with: list[str] = Field(default_factory=list, description="Constraint strings")

    @classmethod
    def from_dto(cls, symbol: ComponentSymbol) -> Self:
        return cls(
            id=symbol.id,
            name=symbol.name,
            namespace=symbol.namespace,
            level=symbol.level,
            kind=symbol.kind,
            version=format_semver(symbol.version),
            language=symbol.language,
            ports=[PortModel.from_dto(p) for p in symbol.ports],
            tags=list(symbol.tags),
            description=symbol.description,
            created_at=symbol.created_at,
            updated_at=symbol.updated_at,
            status=symbol.status,
            origin=symbol.origin,
            contains=list(symbol.contains),
            compatible_with=[r.constraint for r in symbol.compatible_with if r.constraint],
        )


class SymbolListResponse(BaseModel):
    symbols: list[SymbolResponse]
    total: int

    @classmethod
    def from_dto(cls, symbols: list[ComponentSymbol]) -> Self:
        return cls(symbols=[SymbolResponse.from_dto(s) for s in symbols], total=len(symbols))


class RegisterSymbolRequest(BaseModel):
    """Request to register a symbol; the id and (by default) level are derived."""

    name: str
    kind: ComponentKind
    version: str
    namespace: str = ""
    level: AbstractionLevel | None = None
    language: str = "typescript"
    ports: list[PortModel] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    contains: list[str] = Field(default_factory=list)
    status: SymbolStatus = SymbolStatus.DECLARED
    origin: SymbolOrigin = SymbolOrigin.MANUAL

    def to_fields(self) -> dict[str, Any]:
        """Optional ComponentSymbol fields for SymbolTableService.register_new."""
        return {
            "language": self.language,
            "ports": [p.to_dto() for p in self.ports],
            "tags": list(self.tags),
            "description": self.description,
            "contains": list(self.contains),
            "status": self.status,
            "origin": self.origin,
        }


class SymbolQueryRequest(BaseModel):
    """Symbol list filters; every filter that is set must match."""

    namespace: str | None = None
    level: AbstractionLevel | None = None
    kind: ComponentKind | None = None
    language: str | None = None
    status: SymbolStatus | None = None
    origin: SymbolOrigin | None = None
    tag: str | None = None
    search: str | None = None

    def to_dto(self) -> ComponentQuery:
        return ComponentQuery(**self.model_dump())
