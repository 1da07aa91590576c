"""Memory Store - tests for the in-memory record service.

Tests cover:
    - ids start at 1 and are not reused after delete
    - put/delete/get on missing ids raise RecordNotFoundError
    - Stored records are copies (no aliasing with caller objects)
    - query filters on name and keeps id order
"""

import pytest

from lazyrest.core.errors import RecordNotFoundError, ServiceError
from lazyrest.core.validator import validate_service
from lazyrest.schemas.record import Record


def test_store_satisfies_contract(store):
    descriptor = validate_service(store, payload_type=Record)
    assert descriptor.supports_query


def test_new_assigns_sequential_ids(store, ctx):
    assert store.new(ctx, Record(name="a")) == 1
    assert store.new(ctx, Record(name="b")) == 2


def test_ids_not_reused_after_delete(store, ctx):
    first = store.new(ctx, Record(name="a"))
    store.delete(ctx, first)
    assert store.new(ctx, Record(name="b")) == first + 1


def test_new_ignores_incoming_id(store, ctx):
    record_id = store.new(ctx, Record(id=50, name="a"))
    assert store.get(ctx, record_id).id == record_id


def test_get_missing_raises(store, ctx):
    with pytest.raises(RecordNotFoundError, match="ID 4 does not exist"):
        store.get(ctx, 4)


def test_put_missing_does_not_create(store, ctx):
    with pytest.raises(RecordNotFoundError):
        store.put(ctx, 3, Record(name="x"))
    assert len(store) == 0


def test_delete_missing_raises(store, ctx):
    with pytest.raises(RecordNotFoundError):
        store.delete(ctx, 1)


def test_records_are_copied(store, ctx):
    incoming = Record(name="original")
    record_id = store.new(ctx, incoming)
    incoming.name = "mutated"
    fetched = store.get(ctx, record_id)
    fetched.name = "also mutated"
    assert store.get(ctx, record_id).name == "original"


def test_fail_new(store, ctx):
    store.fail_new = True
    with pytest.raises(ServiceError, match="New Failure"):
        store.new(ctx, Record(name="a"))
    assert len(store) == 0


def test_query_filters_on_any_given_name(store, ctx):
    for name in ("a", "b", "c", "a"):
        store.new(ctx, Record(name=name))
    found = store.query(ctx, {"name": ["a", "c"]})
    assert [r.id for r in found] == [1, 3, 4]


def test_query_ignores_unknown_keys(store, ctx):
    store.new(ctx, Record(name="a"))
    assert len(store.query(ctx, {"colour": ["red"]})) == 1
