"""
Symbol package.
"""

from .symbol_id_comp import SymbolIdParts, build_symbol_id, parse_symbol_id
from .symbol_query_comp import (
    filter_by_query,
    filter_untested,
    find_dependents,
    iter_type_ids,
    referenced_type_ids,
    references_symbol,
)
from .symbol_validator_comp import (
    check_containment,
    check_new_symbol,
    check_symbol_shape,
    check_updated_symbol,
    find_containment_cycles,
    validate_symbol_by_id,
    validate_symbol_table,
)
from .version_resolver_comp import (
    bump_version,
    compare_semver,
    find_best_match,
    format_semver,
    is_compatible,
    is_newer,
    parse_constraint,
    parse_semver,
    satisfies,
    satisfies_constraint,
    sort_versions_asc,
    sort_versions_desc,
)

__all__ = [
    "SymbolIdParts",
    "build_symbol_id",
    "bump_version",
    "check_containment",
    "check_new_symbol",
    "check_symbol_shape",
    "check_updated_symbol",
    "compare_semver",
    "filter_by_query",
    "filter_untested",
    "find_best_match",
    "find_containment_cycles",
    "find_dependents",
    "format_semver",
    "is_compatible",
    "is_newer",
    "iter_type_ids",
    "parse_constraint",
    "parse_semver",
    "parse_symbol_id",
    "referenced_type_ids",
    "references_symbol",
    "satisfies",
    "satisfies_constraint",
    "sort_versions_asc",
    "sort_versions_desc",
    "validate_symbol_by_id",
    "validate_symbol_table",
]
