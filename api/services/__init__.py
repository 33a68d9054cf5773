"""Service layer for redirect logic.

Services hold the pure URL and content logic, keeping routes thin and
focused on HTTP handling.

Layer hierarchy:
    Routes (HTTP) -> Services (URL composition, content scanning)

Services should:
- Be importable and testable without an ASGI app
- Raise configuration errors at construction time only

Services should NOT:
- Know about HTTP request/response details
- Hold module-level mutable state
"""
