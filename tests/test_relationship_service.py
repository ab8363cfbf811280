"""Tests for the relationship service."""
import uuid

import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.schemas.customer_schemas import RelationshipCreate
from app.services import customer_service, relationship_service


def _edge(a, b, kind="referrer", notes=None):
    return RelationshipCreate(customer_id=a, related_customer_id=b, relationship_type=kind, notes=notes)


async def test_add_relationship_returns_row(store, make_customer):
    a = await make_customer(name="A")
    b = await make_customer(name="B")

    result = await relationship_service.add_relationship(store, _edge(a.id, b.id, notes="met at expo"))

    edge = result.relationship
    assert edge.id is not None
    assert edge.customer_id == a.id
    assert edge.related_customer_id == b.id
    assert edge.relationship_type == "referrer"
    assert edge.notes == "met at expo"


async def test_same_ordered_pair_conflicts(store, make_customer):
    a = await make_customer(name="A")
    b = await make_customer(name="B")
    await relationship_service.add_relationship(store, _edge(a.id, b.id))

    with pytest.raises(ConflictError):
        await relationship_service.add_relationship(store, _edge(a.id, b.id))
    # The type does not matter, the pair does.
    with pytest.raises(ConflictError):
        await relationship_service.add_relationship(store, _edge(a.id, b.id, kind="spouse"))


async def test_reverse_pair_is_independent(store, make_customer):
    a = await make_customer(name="A")
    b = await make_customer(name="B")
    await relationship_service.add_relationship(store, _edge(a.id, b.id))

    result = await relationship_service.add_relationship(store, _edge(b.id, a.id))

    assert result.relationship.customer_id == b.id


async def test_edges_do_not_require_existing_customers(store):
    result = await relationship_service.add_relationship(store, _edge(uuid.uuid4(), uuid.uuid4()))
    assert result.relationship.id is not None


async def test_remove_relationship(store, make_customer):
    a = await make_customer(name="A")
    b = await make_customer(name="B")
    edge = (await relationship_service.add_relationship(store, _edge(a.id, b.id))).relationship

    ack = await relationship_service.remove_relationship(store, edge.id)

    assert ack.message == "Relationship deleted successfully"
    assert await relationship_service.list_for_customer(store, a.id) == []
    # Hard delete: the pair can be added again.
    await relationship_service.add_relationship(store, _edge(a.id, b.id))


async def test_remove_unknown_relationship_is_not_found(store):
    with pytest.raises(NotFoundError):
        await relationship_service.remove_relationship(store, uuid.uuid4())


async def test_customer_detail_lists_outgoing_edges_with_names(store, make_customer):
    a = await make_customer(name="Alice")
    b = await make_customer(name="Bob")
    c = await make_customer(name="Carol")
    await relationship_service.add_relationship(store, _edge(a.id, b.id, kind="spouse"))
    await relationship_service.add_relationship(store, _edge(c.id, a.id, kind="referrer"))

    detail = await customer_service.get_customer(store, a.id)

    assert [(r.related_customer_id, r.relationship_type, r.related_customer_name) for r in detail.relationships] == [
        (b.id, "spouse", "Bob")
    ]


async def test_dangling_related_customer_has_no_name(store, make_customer):
    a = await make_customer(name="Alice")
    ghost = uuid.uuid4()
    await relationship_service.add_relationship(store, _edge(a.id, ghost))

    detail = await customer_service.get_customer(store, a.id)

    assert len(detail.relationships) == 1
    assert detail.relationships[0].related_customer_id == ghost
    assert detail.relationships[0].related_customer_name is None


async def test_self_reference_is_rejected():
    same = uuid.uuid4()
    with pytest.raises(ValueError):
        _edge(same, same)
