from dataclasses import replace

import pytest

from supplies.errors import InsufficientStock, NotFound, ValidationError
from supplies.lifecycle import available_actions, transition
from supplies.models import RequestStatus
from supplies.storage import FulfillOutcome, LocalBackend


def _new_request(store, stock, quantity):
    mat = store.add_material("Sticky notes", stock, "pad")
    user = store.find_user_by_username("somchai")
    return mat, store.create_request(user.id, mat.id, quantity)


def test_approve_then_issue_takes_stock_once(store):
    mat, req = _new_request(store, stock=10, quantity=5)

    transition(store, req.id, "APPROVED")
    assert store.get_request(req.id).status is RequestStatus.APPROVED
    assert store.get_material(mat.id).stock == 10

    message = transition(store, req.id, RequestStatus.ISSUED)
    assert "Issued 5 pad of Sticky notes" in message
    assert store.get_material(mat.id).stock == 5
    assert store.get_request(req.id).status is RequestStatus.ISSUED

    again = transition(store, req.id, RequestStatus.ISSUED)
    assert "already issued" in again
    assert store.get_material(mat.id).stock == 5


def test_issue_without_enough_stock_changes_nothing(store):
    mat, req = _new_request(store, stock=3, quantity=5)
    transition(store, req.id, "APPROVED")

    with pytest.raises(InsufficientStock) as exc:
        transition(store, req.id, "ISSUED")

    assert exc.value.stock == 3
    assert exc.value.requested == 5
    assert "Available: 3" in str(exc.value)
    assert "requested: 5" in str(exc.value)
    assert store.get_material(mat.id).stock == 3
    assert store.get_request(req.id).status is RequestStatus.APPROVED


def test_issue_exact_stock_leaves_zero(store):
    mat, req = _new_request(store, stock=5, quantity=5)
    transition(store, req.id, "ISSUED")
    assert store.get_material(mat.id).stock == 0

    _, second = _new_request(store, stock=0, quantity=1)
    with pytest.raises(InsufficientStock):
        transition(store, second.id, "ISSUED")


def test_unknown_request(store):
    with pytest.raises(NotFound) as exc:
        transition(store, 9999, "APPROVED")
    assert exc.value.kind == "request"


def test_issue_with_deleted_material(store):
    mat, req = _new_request(store, stock=10, quantity=1)
    store.delete_material(mat.id)

    with pytest.raises(NotFound) as exc:
        transition(store, req.id, "ISSUED")

    assert exc.value.kind == "material"
    assert store.get_request(req.id).status is RequestStatus.PENDING


def test_unknown_status_name(store):
    _, req = _new_request(store, stock=10, quantity=1)
    with pytest.raises(ValidationError):
        transition(store, req.id, "SHIPPED")


def test_approve_and_reject_do_not_check_source_status(store):
    mat, req = _new_request(store, stock=10, quantity=2)

    transition(store, req.id, "REJECTED")
    transition(store, req.id, "APPROVED")
    assert store.get_request(req.id).status is RequestStatus.APPROVED

    transition(store, req.id, "ISSUED")
    assert store.get_material(mat.id).stock == 8


def test_issued_request_cannot_be_reopened(store):
    mat, req = _new_request(store, stock=10, quantity=4)
    transition(store, req.id, "ISSUED")

    with pytest.raises(ValidationError):
        transition(store, req.id, "REJECTED")

    transition(store, req.id, "ISSUED")
    assert store.get_request(req.id).status is RequestStatus.ISSUED
    assert store.get_material(mat.id).stock == 6


def test_stock_never_negative_after_many_issues(store):
    mat = store.add_material("Toner", 7, "cartridge")
    user = store.find_user_by_username("somsri")
    reqs = [store.create_request(user.id, mat.id, 3) for _ in range(4)]

    issued = 0
    for req in reqs:
        try:
            transition(store, req.id, "ISSUED")
            issued += 1
        except InsufficientStock:
            pass
    transition(store, reqs[0].id, "ISSUED")

    assert issued == 2
    assert store.get_material(mat.id).stock == 1
    assert all(m.stock >= 0 for m in store.materials)


def test_conflicting_writer_is_reported_as_insufficient(store):
    """Another process drains the stock between the check and the update."""
    mat, req = _new_request(store, stock=5, quantity=4)
    store.backend.update("materials", mat.id, {"stock": 1})
    # the in-memory copy still shows the old stock
    store.materials = [replace(m, stock=5) if m.id == mat.id else m for m in store.materials]

    with pytest.raises(InsufficientStock) as exc:
        transition(store, req.id, "ISSUED")

    assert exc.value.stock == 1
    assert store.get_material(mat.id).stock == 1
    assert store.get_request(req.id).status is RequestStatus.PENDING


def test_issued_elsewhere_cannot_be_rejected_from_a_stale_copy(store):
    """Another writer issues the request while this store still shows it APPROVED."""
    mat, req = _new_request(store, stock=10, quantity=4)
    transition(store, req.id, "APPROVED")
    assert store.backend.fulfill(req.id, mat.id, 4) is FulfillOutcome.ISSUED
    store.requests = [
        replace(r, status=RequestStatus.APPROVED) if r.id == req.id else r for r in store.requests
    ]

    with pytest.raises(ValidationError):
        transition(store, req.id, "REJECTED")

    assert store.get_request(req.id).status is RequestStatus.ISSUED
    assert "already issued" in transition(store, req.id, "ISSUED")
    assert store.get_material(mat.id).stock == 6


def test_second_process_issue_is_not_taken_twice(local_store):
    mat, req = _new_request(local_store, stock=10, quantity=4)
    other_process = LocalBackend(local_store.backend.path)
    assert other_process.fulfill(req.id, mat.id, 4) is FulfillOutcome.ISSUED

    # local_store has not synced, it still sees PENDING
    assert local_store.get_request(req.id).status is RequestStatus.PENDING
    with pytest.raises(ValidationError):
        transition(local_store, req.id, "REJECTED")
    with pytest.raises(ValidationError):
        transition(local_store, req.id, "APPROVED")
    assert "already issued" in transition(local_store, req.id, "ISSUED")

    assert local_store.get_material(mat.id).stock == 6


def test_available_actions(store):
    _, req = _new_request(store, stock=10, quantity=1)
    assert available_actions(req) == (RequestStatus.APPROVED, RequestStatus.REJECTED)

    transition(store, req.id, "APPROVED")
    assert available_actions(store.get_request(req.id)) == (RequestStatus.ISSUED,)

    transition(store, req.id, "ISSUED")
    assert available_actions(store.get_request(req.id)) == ()
