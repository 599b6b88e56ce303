"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that several features use (store wiring,
identity provider client). Keep feature-specific queries and business logic
in the corresponding feature package (e.g. `models/`).
"""
