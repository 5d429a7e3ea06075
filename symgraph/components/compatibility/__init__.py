"""
Compatibility package.
"""

from .port_compatibility_comp import (
    BUILTIN_WIDENINGS,
    check_direction_compatibility,
    check_port_compatibility,
    check_type_compatibility,
)

__all__ = [
    "BUILTIN_WIDENINGS",
    "check_direction_compatibility",
    "check_port_compatibility",
    "check_type_compatibility",
]
