"""
Plain-dict encoding of symbol DTOs.

Used for JSON columns in the SQLite repository and for bulk
import/export. Output contains only JSON-native types.

Rules:
- Import only stdlib and symgraph.helpers.dto
- No I/O
"""

from __future__ import annotations

from typing import Any

from symgraph.helpers.dto.symbol_dto import (
    AbstractionLevel,
    ComponentKind,
    ComponentSymbol,
    GenerationMetadata,
    PortDefinition,
    PortDirection,
    SemVer,
    SourceLocation,
    StatusInfo,
    SymbolOrigin,
    SymbolStatus,
    TypeReference,
    VersionRange,
)


# ----------------------------------------------------------------------
#  Versions
# ----------------------------------------------------------------------
def semver_to_dict(version: SemVer) -> dict[str, Any]:
    return {
        "major": version.major,
        "minor": version.minor,
        "patch": version.patch,
        "prerelease": version.prerelease,
        "build": version.build,
    }


def semver_from_dict(data: dict[str, Any]) -> SemVer:
    return SemVer(
        int(data["major"]),
        int(data["minor"]),
        int(data["patch"]),
        data.get("prerelease"),
        data.get("build"),
    )


def version_range_to_dict(version_range: VersionRange) -> dict[str, Any]:
    return {
        "min": semver_to_dict(version_range.min) if version_range.min else None,
        "max": semver_to_dict(version_range.max) if version_range.max else None,
        "max_inclusive": version_range.max_inclusive,
        "constraint": version_range.constraint,
    }


def version_range_from_dict(data: dict[str, Any]) -> VersionRange:
    return VersionRange(
        min=semver_from_dict(data["min"]) if data.get("min") else None,
        max=semver_from_dict(data["max"]) if data.get("max") else None,
        max_inclusive=bool(data.get("max_inclusive", False)),
        constraint=data.get("constraint"),
    )


# ----------------------------------------------------------------------
#  Ports
# ----------------------------------------------------------------------
def type_ref_to_dict(ref: TypeReference) -> dict[str, Any]:
    data: dict[str, Any] = {"symbol_id": ref.symbol_id}
    if ref.version is not None:
        data["version"] = ref.version
    if ref.generics:
        data["generics"] = [type_ref_to_dict(g) for g in ref.generics]
    if ref.nullable:
        data["nullable"] = True
    return data


def type_ref_from_dict(data: dict[str, Any]) -> TypeReference:
    # TypeReference enforces the nesting bound, so malformed deep input fails here
    return TypeReference(
        symbol_id=data["symbol_id"],
        version=data.get("version"),
        generics=tuple(type_ref_from_dict(g) for g in data.get("generics", [])),
        nullable=bool(data.get("nullable", False)),
    )


def port_to_dict(port: PortDefinition) -> dict[str, Any]:
    return {
        "name": port.name,
        "direction": port.direction.value,
        "type": type_ref_to_dict(port.type),
        "required": port.required,
        "multiple": port.multiple,
        "description": port.description,
        "default_value": port.default_value,
    }


def port_from_dict(data: dict[str, Any]) -> PortDefinition:
    return PortDefinition(
        name=data["name"],
        direction=PortDirection(data["direction"]),
        type=type_ref_from_dict(data["type"]),
        required=bool(data.get("required", False)),
        multiple=bool(data.get("multiple", False)),
        description=data.get("description", ""),
        default_value=data.get("default_value"),
    )


# ----------------------------------------------------------------------
#  Optional metadata blocks
# ----------------------------------------------------------------------
def source_location_to_dict(loc: SourceLocation | None) -> dict[str, Any] | None:
    if loc is None:
        return None
    return {
        "file_path": loc.file_path,
        "start_line": loc.start_line,
        "end_line": loc.end_line,
        "content_hash": loc.content_hash,
        "start_column": loc.start_column,
        "end_column": loc.end_column,
    }


def source_location_from_dict(data: dict[str, Any] | None) -> SourceLocation | None:
    if not data:
        return None
    return SourceLocation(**data)


def status_info_to_dict(info: StatusInfo | None) -> dict[str, Any] | None:
    if info is None:
        return None
    return {
        "updated_at": info.updated_at,
        "source": info.source,
        "referenced_by": list(info.referenced_by),
        "tested_by": list(info.tested_by),
    }


def status_info_from_dict(data: dict[str, Any] | None) -> StatusInfo | None:
    if not data:
        return None
    return StatusInfo(
        updated_at=int(data["updated_at"]),
        source=data["source"],
        referenced_by=list(data.get("referenced_by", [])),
        tested_by=list(data.get("tested_by", [])),
    )


def generation_meta_to_dict(meta: GenerationMetadata | None) -> dict[str, Any] | None:
    if meta is None:
        return None
    return {
        "template_id": meta.template_id,
        "generated_at": meta.generated_at,
        "content_hash": meta.content_hash,
        "generated_path": meta.generated_path,
        "implementation_path": meta.implementation_path,
    }


def generation_meta_from_dict(data: dict[str, Any] | None) -> GenerationMetadata | None:
    if not data:
        return None
    return GenerationMetadata(**data)


# ----------------------------------------------------------------------
#  Symbols
# ----------------------------------------------------------------------
def symbol_to_dict(symbol: ComponentSymbol) -> dict[str, Any]:
    return {
        "id": symbol.id,
        "name": symbol.name,
        "namespace": symbol.namespace,
        "level": symbol.level.value,
        "kind": symbol.kind.value,
        "version": semver_to_dict(symbol.version),
        "language": symbol.language,
        "ports": [port_to_dict(p) for p in symbol.ports],
        "tags": list(symbol.tags),
        "description": symbol.description,
        "created_at": symbol.created_at,
        "updated_at": symbol.updated_at,
        "status": symbol.status.value,
        "origin": symbol.origin.value,
        "contains": list(symbol.contains),
        "compatible_with": [version_range_to_dict(r) for r in symbol.compatible_with],
        "source_location": source_location_to_dict(symbol.source_location),
        "status_info": status_info_to_dict(symbol.status_info),
        "generation_meta": generation_meta_to_dict(symbol.generation_meta),
    }


def symbol_from_dict(data: dict[str, Any]) -> ComponentSymbol:
    """
    Decode a symbol produced by symbol_to_dict.

    Raises:
        KeyError: If a required field is missing
        ValueError: If an enum value or type reference is invalid
    """
    return ComponentSymbol(
        id=data["id"],
        name=data["name"],
        namespace=data.get("namespace", ""),
        level=AbstractionLevel(data["level"]),
        kind=ComponentKind(data["kind"]),
        version=semver_from_dict(data["version"]),
        language=data.get("language", "typescript"),
        ports=[port_from_dict(p) for p in data.get("ports", [])],
        tags=list(data.get("tags", [])),
        description=data.get("description", ""),
        created_at=int(data.get("created_at", 0)),
        updated_at=int(data.get("updated_at", 0)),
        status=SymbolStatus(data.get("status", SymbolStatus.DECLARED.value)),
        origin=SymbolOrigin(data.get("origin", SymbolOrigin.MANUAL.value)),
        contains=list(data.get("contains", [])),
        compatible_with=[version_range_from_dict(r) for r in data.get("compatible_with", [])],
        source_location=source_location_from_dict(data.get("source_location")),
        status_info=status_info_from_dict(data.get("status_info")),
        generation_meta=generation_meta_from_dict(data.get("generation_meta")),
    )
