"""
Port compatibility rules.

Decides whether an output port may feed an input port. Direction is checked
first and a failing direction never falls through to the type check. All
functions are pure and report failure through CompatibilityResult.

Scoring (COMPATIBLE mode) starts at 100 and subtracts per relaxation:
    built-in numeric widening   -10
    non-null -> nullable         -5
    defaulted generic argument  -10
    nullable into a port with a default value  -5
Penalties accumulate through nested generics; the score is floored at 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from symgraph.helpers.dto.compatibility_dto import CompatibilityResult, TypeCompatibilityMode
from symgraph.helpers.dto.symbol_dto import MAX_TYPE_DEPTH, PortDefinition, PortDirection, TypeReference

logger = logging.getLogger(__name__)

PERFECT_SCORE = 100
WIDENING_PENALTY = 10
NULL_WIDENING_PENALTY = 5
DEFAULTED_GENERIC_PENALTY = 10
TOLERATED_NULL_PENALTY = 5

VALID_DIRECTION_PAIRS: frozenset[tuple[PortDirection, PortDirection]] = frozenset(
    {
        (PortDirection.OUT, PortDirection.IN),
        (PortDirection.OUT, PortDirection.INOUT),
        (PortDirection.INOUT, PortDirection.IN),
        (PortDirection.INOUT, PortDirection.INOUT),
    }
)

# Lossless built-in conversions (source type id -> accepted target ids)
BUILTIN_WIDENINGS: dict[str, frozenset[str]] = {
    "core/int8@1.0.0": frozenset(
        {"core/int16@1.0.0", "core/int32@1.0.0", "core/int64@1.0.0", "core/float32@1.0.0", "core/float64@1.0.0"}
    ),
    "core/int16@1.0.0": frozenset({"core/int32@1.0.0", "core/int64@1.0.0", "core/float32@1.0.0", "core/float64@1.0.0"}),
    "core/int32@1.0.0": frozenset({"core/int64@1.0.0", "core/float64@1.0.0"}),
    "core/int64@1.0.0": frozenset({"core/float64@1.0.0"}),
    "core/float32@1.0.0": frozenset({"core/float64@1.0.0"}),
}


def compatible(score: int = PERFECT_SCORE) -> CompatibilityResult:
    return CompatibilityResult(compatible=True, score=max(0, min(PERFECT_SCORE, score)))


def incompatible(reason: str, suggestions: list[str] | None = None) -> CompatibilityResult:
    return CompatibilityResult(compatible=False, reason=reason, suggestions=suggestions or [], score=0)


# ----------------------------------------------------------------------
#  Direction
# ----------------------------------------------------------------------
def check_direction_compatibility(from_direction: PortDirection, to_direction: PortDirection) -> CompatibilityResult:
    """
    Check that data can flow from a port with from_direction to one with to_direction.

    Valid pairs: out->in, out->inout, inout->in, inout->inout.
    """
    if (from_direction, to_direction) in VALID_DIRECTION_PAIRS:
        return compatible()

    if from_direction == PortDirection.IN and to_direction == PortDirection.IN:
        return incompatible(
            "Cannot connect two input ports - both consume data",
            ["Change one port to output (out) direction"],
        )
    if from_direction == PortDirection.OUT and to_direction == PortDirection.OUT:
        return incompatible(
            "Cannot connect two output ports - both produce data",
            ["Change one port to input (in) direction"],
        )
    if from_direction == PortDirection.IN:
        return incompatible(
            "Cannot connect from input port - data flows the wrong way",
            ["Swap connection direction", "Change source port to output or inout"],
        )
    return incompatible(
        f"Invalid direction pair: {from_direction.value} -> {to_direction.value}",
        ["Use out -> in for standard data flow"],
    )


# ----------------------------------------------------------------------
#  Types
# ----------------------------------------------------------------------
@dataclass
class _Outcome:
    ok: bool = True
    penalty: int = 0
    reason: str | None = None
    suggestions: list[str] = field(default_factory=list)


def _fail(reason: str, *suggestions: str) -> _Outcome:
    return _Outcome(ok=False, reason=reason, suggestions=list(suggestions))


def _strict(src: TypeReference, dst: TypeReference, depth: int) -> _Outcome:
    if depth > MAX_TYPE_DEPTH:
        return _fail(f"Type nesting exceeds maximum depth {MAX_TYPE_DEPTH}")
    if src.symbol_id != dst.symbol_id:
        return _fail(
            f"Type mismatch: '{src.symbol_id}' is not '{dst.symbol_id}'",
            "Use matching types or add a type converter",
        )
    if src.nullable != dst.nullable:
        src_null = "nullable" if src.nullable else "non-nullable"
        dst_null = "nullable" if dst.nullable else "non-nullable"
        return _fail(f"Nullability mismatch: {src_null} to {dst_null}", "Match nullability between ports")
    if len(src.generics) != len(dst.generics):
        return _fail(
            f"Generic parameter count mismatch: {len(src.generics)} vs {len(dst.generics)}",
            "Match the number of generic parameters",
        )
    for i, (g_src, g_dst) in enumerate(zip(src.generics, dst.generics, strict=True)):
        inner = _strict(g_src, g_dst, depth + 1)
        if not inner.ok:
            return _fail(f"Generic parameter {i + 1} incompatible: {inner.reason}", *inner.suggestions)
    return _Outcome()


def _relaxed(src: TypeReference, dst: TypeReference, depth: int, tolerates_null: bool) -> _Outcome:
    if depth > MAX_TYPE_DEPTH:
        return _fail(f"Type nesting exceeds maximum depth {MAX_TYPE_DEPTH}")

    penalty = 0
    if src.symbol_id != dst.symbol_id:
        if dst.symbol_id not in BUILTIN_WIDENINGS.get(src.symbol_id, frozenset()):
            return _fail(
                f"Type mismatch: '{src.symbol_id}' is not compatible with '{dst.symbol_id}'",
                "Use the same type or add a type converter",
            )
        penalty += WIDENING_PENALTY

    if src.nullable and not dst.nullable:
        if not tolerates_null:
            return _fail(
                "Nullable value cannot flow to non-nullable target",
                "Add null check before connection",
                "Make target port nullable",
                "Provide default value",
            )
        penalty += TOLERATED_NULL_PENALTY
    elif not src.nullable and dst.nullable:
        penalty += NULL_WIDENING_PENALTY

    # Missing trailing generic arguments on either side are treated as defaulted
    penalty += DEFAULTED_GENERIC_PENALTY * abs(len(src.generics) - len(dst.generics))
    for i, (g_src, g_dst) in enumerate(zip(src.generics, dst.generics)):
        # Only the top-level value can fall back to the port's default
        inner = _relaxed(g_src, g_dst, depth + 1, tolerates_null=False)
        if not inner.ok:
            return _fail(f"Generic parameter {i + 1} incompatible: {inner.reason}", *inner.suggestions)
        penalty += inner.penalty

    return _Outcome(penalty=penalty)


def check_type_compatibility(
    from_type: TypeReference,
    to_type: TypeReference,
    mode: TypeCompatibilityMode = TypeCompatibilityMode.COMPATIBLE,
    tolerates_null: bool = False,
) -> CompatibilityResult:
    """
    Check whether a value of from_type may flow into to_type.

    Args:
        from_type: Type of the producing port
        to_type: Type of the consuming port
        mode: STRICT requires identical types; COMPATIBLE allows widening
        tolerates_null: The consumer can substitute a default for null (COMPATIBLE only)
    """
    if mode == TypeCompatibilityMode.STRICT:
        outcome = _strict(from_type, to_type, depth=1)
    else:
        outcome = _relaxed(from_type, to_type, depth=1, tolerates_null=tolerates_null)

    if not outcome.ok:
        return incompatible(outcome.reason or "Types are incompatible", outcome.suggestions)
    return compatible(PERFECT_SCORE - outcome.penalty)


# ----------------------------------------------------------------------
#  Ports
# ----------------------------------------------------------------------
def check_port_compatibility(
    output_port: PortDefinition,
    input_port: PortDefinition,
    mode: TypeCompatibilityMode = TypeCompatibilityMode.COMPATIBLE,
) -> CompatibilityResult:
    """
    Full compatibility check between a producing and a consuming port.

    A role-swapped pair is rejected by the direction check before any type
    comparison happens. An input port that declares a default value tolerates
    a nullable source.
    """
    direction = check_direction_compatibility(output_port.direction, input_port.direction)
    if not direction.compatible:
        return direction

    return check_type_compatibility(
        output_port.type,
        input_port.type,
        mode,
        tolerates_null=input_port.default_value is not None,
    )
