"""lazyrest - REST endpoints generated from plain resource service objects.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports from defining modules, no star exports
"""
