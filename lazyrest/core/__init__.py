"""Core Layer - service contract, validation and request context.

Invariants:
    - No module in core/ imports from api/, services/ or infrastructure/
    - Validation is pure: it inspects services and never calls them
"""
