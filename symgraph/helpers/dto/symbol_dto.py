"""
Symbol domain DTOs.

Data transfer objects describing registered component symbols, their ports
and the type references carried by those ports. These form cross-layer
contracts between the repository, the services and the API facade.

Rules:
- Import only stdlib and typing (no symgraph.* imports)
- Pure data structures only (no I/O, no DB access, no business logic)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Maximum nesting of generic type arguments (List<Map<K, V>> has depth 3).
MAX_TYPE_DEPTH = 8


class AbstractionLevel(str, Enum):
    """Tier in the component hierarchy, from primitive types (L0) to contracts (L4)."""

    L0 = "L0"
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"


class ComponentKind(str, Enum):
    TYPE = "type"
    ENUM = "enum"
    CONSTANT = "constant"
    FUNCTION = "function"
    CLASS = "class"
    SERVICE = "service"
    MODULE = "module"
    SUBSYSTEM = "subsystem"
    CONTRACT = "contract"


KIND_TO_LEVEL: dict[ComponentKind, AbstractionLevel] = {
    ComponentKind.TYPE: AbstractionLevel.L0,
    ComponentKind.ENUM: AbstractionLevel.L0,
    ComponentKind.CONSTANT: AbstractionLevel.L0,
    ComponentKind.FUNCTION: AbstractionLevel.L1,
    ComponentKind.CLASS: AbstractionLevel.L1,
    ComponentKind.SERVICE: AbstractionLevel.L1,
    ComponentKind.MODULE: AbstractionLevel.L2,
    ComponentKind.SUBSYSTEM: AbstractionLevel.L3,
    ComponentKind.CONTRACT: AbstractionLevel.L4,
}


class SymbolStatus(str, Enum):
    """Usage status; `declared` means nothing references the symbol yet."""

    DECLARED = "declared"
    REFERENCED = "referenced"
    TESTED = "tested"
    EXECUTED = "executed"


class SymbolOrigin(str, Enum):
    GENERATED = "generated"
    MANUAL = "manual"
    EXTERNAL = "external"


class PortDirection(str, Enum):
    IN = "in"
    OUT = "out"
    INOUT = "inout"


@dataclass(frozen=True)
class SemVer:
    """Semantic version triple plus optional prerelease and build qualifiers."""

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise ValueError(f"Version numbers must be non-negative: {self.major}.{self.minor}.{self.patch}")

    @property
    def triple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)


@dataclass(frozen=True)
class VersionRange:
    """
    Range of acceptable versions.

    `min` is inclusive. `max` is exclusive unless `max_inclusive` is set
    (exact constraints use min == max with an inclusive bound). A range with
    neither bound accepts every version.
    """

    min: SemVer | None = None
    max: SemVer | None = None
    max_inclusive: bool = False
    constraint: str | None = None


@dataclass(frozen=True)
class TypeReference:
    """
    Reference to the symbol that types a port.

    Generic arguments nest recursively; construction fails beyond
    MAX_TYPE_DEPTH so that every traversal of a reference terminates.
    """

    symbol_id: str
    version: str | None = None
    generics: tuple[TypeReference, ...] = ()
    nullable: bool = False

    def __post_init__(self) -> None:
        if not self.symbol_id:
            raise ValueError("TypeReference.symbol_id must not be empty")
        # Accept lists from callers but store an immutable tuple
        if not isinstance(self.generics, tuple):
            object.__setattr__(self, "generics", tuple(self.generics))
        if self.depth > MAX_TYPE_DEPTH:
            raise ValueError(f"Type reference '{self.symbol_id}' exceeds maximum nesting depth {MAX_TYPE_DEPTH}")

    @property
    def depth(self) -> int:
        if not self.generics:
            return 1
        return 1 + max(g.depth for g in self.generics)


@dataclass
class PortDefinition:
    """Named, typed, directional attachment point on a symbol."""

    name: str
    direction: PortDirection
    type: TypeReference
    required: bool = False
    multiple: bool = False
    description: str = ""
    default_value: Any = None

    @property
    def is_output_capable(self) -> bool:
        return self.direction in (PortDirection.OUT, PortDirection.INOUT)

    @property
    def is_input_capable(self) -> bool:
        return self.direction in (PortDirection.IN, PortDirection.INOUT)


@dataclass
class SourceLocation:
    file_path: str
    start_line: int
    end_line: int
    content_hash: str
    start_column: int | None = None
    end_column: int | None = None


@dataclass
class StatusInfo:
    """Provenance of the current status (registration, static analysis, coverage, runtime)."""

    updated_at: int
    source: str
    referenced_by: list[str] = field(default_factory=list)
    tested_by: list[str] = field(default_factory=list)


@dataclass
class GenerationMetadata:
    template_id: str
    generated_at: int
    content_hash: str
    generated_path: str
    implementation_path: str | None = None


@dataclass
class ComponentSymbol:
    """
    Core symbol entity.

    `id` is derived from namespace, name and version
    (`namespace/name@major.minor.patch[-pre][+build]`) and never changes
    after registration. Timestamps are epoch milliseconds.
    """

    id: str
    name: str
    namespace: str
    level: AbstractionLevel
    kind: ComponentKind
    version: SemVer
    language: str = "typescript"
    ports: list[PortDefinition] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    description: str = ""
    created_at: int = 0
    updated_at: int = 0
    status: SymbolStatus = SymbolStatus.DECLARED
    origin: SymbolOrigin = SymbolOrigin.MANUAL
    contains: list[str] = field(default_factory=list)
    compatible_with: list[VersionRange] = field(default_factory=list)
    source_location: SourceLocation | None = None
    status_info: StatusInfo | None = None
    generation_meta: GenerationMetadata | None = None

    def get_port(self, name: str) -> PortDefinition | None:
        for port in self.ports:
            if port.name == name:
                return port
        return None


@dataclass
class ComponentQuery:
    """Multi-filter symbol query; every set filter must match (AND)."""

    namespace: str | None = None
    level: AbstractionLevel | None = None
    kind: ComponentKind | None = None
    language: str | None = None
    status: SymbolStatus | None = None
    origin: SymbolOrigin | None = None
    tag: str | None = None
    search: str | None = None


@dataclass
class ImportSymbolsResult:
    """Result from symbol_table_service.import_symbols."""

    imported: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
