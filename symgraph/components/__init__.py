"""Components layer - domain logic modules.

This layer contains the modules that implement the heavy lifting:
- SemVer parsing and constraint resolution
- Symbol validation and structural queries
- Port compatibility rules
- Dependency graph algorithms (cycles, ordering, traversal)

Components are leaf modules that:
- Do NOT import services or interfaces
- ARE imported and used BY services
- May import from: helpers, persistence, other components

Architecture:
- helpers/ = stdlib-only utilities and DTOs (pure, stateless)
- persistence/ = repositories and SQLite tables
- components/ = domain logic building blocks (this layer)
- services/ = composition, configuration, long-lived resources
- interfaces/ = API facade and response types
"""
