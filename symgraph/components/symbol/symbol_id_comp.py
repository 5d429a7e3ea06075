"""
Symbol identifier construction and parsing.

Identifier format: `{namespace}/{name}@{version}` where namespace is a
`/`-joined path. An empty namespace yields `{name}@{version}`.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from symgraph.components.symbol.version_resolver_comp import format_semver, parse_semver
from symgraph.helpers.dto.symbol_dto import SemVer

_ID_RE = re.compile(r"^(?:(?P<namespace>.+)/)?(?P<name>[^@/]+)@(?P<version>[^@/]+)$")


class SymbolIdParts(NamedTuple):
    namespace: str
    name: str
    version: SemVer


def build_symbol_id(namespace: str, name: str, version: SemVer) -> str:
    ns = namespace.strip("/")
    prefix = f"{ns}/" if ns else ""
    return f"{prefix}{name}@{format_semver(version)}"


def parse_symbol_id(symbol_id: str) -> SymbolIdParts | None:
    """
    Split a symbol id into namespace, name and version.

    Returns:
        SymbolIdParts, or None if the id is malformed or its version invalid
    """
    match = _ID_RE.match(symbol_id)
    if not match:
        return None
    version = parse_semver(match.group("version"))
    if version is None:
        return None
    return SymbolIdParts(match.group("namespace") or "", match.group("name"), version)
