"""Version information for symgraph."""

# Semantic versioning: MAJOR.MINOR.PATCH
# MAJOR: Breaking changes to the repository contract or DTO shapes
# MINOR: New queries or wiring rules, backward compatible
# PATCH: Bug fixes, backward compatible

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.3.0 - Wiring and graph analysis
#         - Tarjan-based cycle detection with deterministic ordering
#         - Kahn topological order with ascending-id tie-break
#         - Cardinality enforcement serialised inside WiringService
#         - Uniform ApiResponse facade for UI/CLI collaborators
# 0.2.0 - SQLite repository
#         - Normalised tags, containment and connections tables
#         - Single-parent containment enforced by UNIQUE(child_id)
# 0.1.0 - Initial symbol table
#         - SemVer parsing and constraint resolution
#         - In-memory repository and port compatibility checks
