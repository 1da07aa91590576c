"""API Layer - route binding, dynamic dispatch, response envelope, error handlers.

Invariants:
    - Success bodies are JSON envelopes; error bodies are plain text
    - Routes are generated per registered service by api/router.py
"""
