"""Services - resource services shipped with lazyrest.

Invariants:
    - Services depend on core types only (RequestContext, errors), never on api/
"""
