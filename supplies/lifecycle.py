"""Request status transitions.

PENDING -> APPROVED | REJECTED, APPROVED -> ISSUED. Issuing takes the
requested quantity out of the material's stock, and a request takes
stock at most once however many times it is issued.

APPROVED and REJECTED are written from any prior status except ISSUED.
ISSUED checks its own preconditions whatever the current status.
"""
import logging

from supplies.errors import InsufficientStock, NotFound, ValidationError
from supplies.models import RequestStatus
from supplies.storage import FulfillOutcome, StatusOutcome

log = logging.getLogger(__name__)

ACTIONS = {
    RequestStatus.PENDING: (RequestStatus.APPROVED, RequestStatus.REJECTED),
    RequestStatus.APPROVED: (RequestStatus.ISSUED,),
}


def available_actions(request):
    if request.status.is_terminal:
        return ()
    return ACTIONS[request.status]


def _parse_status(value):
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status: {value}.")


def transition(store, request_id, target_status):
    """Move a request to ``target_status`` and return a confirmation message."""
    target = _parse_status(target_status)
    req = store.get_request(request_id)
    if req is None:
        raise NotFound("request", request_id)

    if target is not RequestStatus.ISSUED:
        if req.status is RequestStatus.ISSUED:
            raise ValidationError(f"Request #{req.id} has already been issued.")
        outcome = store.set_request_status(req.id, target)
        if outcome is StatusOutcome.UPDATED:
            log.info("request #%s: %s -> %s", req.id, req.status.value, target.value)
            return f"Request #{req.id} marked {target.value}."
        # issued or removed by another writer since our last sync
        store.reload()
        if outcome is StatusOutcome.MISSING_REQUEST:
            raise NotFound("request", req.id)
        log.warning("request #%s was issued concurrently, %s refused", req.id, target.value)
        raise ValidationError(f"Request #{req.id} has already been issued.")

    if req.status is RequestStatus.ISSUED:
        return f"Request #{req.id} was already issued."

    material = store.get_material(req.material_id)
    if material is None:
        raise NotFound("material", req.material_id)
    if material.stock < req.quantity:
        log.warning(
            "request #%s refused: stock %s < requested %s", req.id, material.stock, req.quantity
        )
        raise InsufficientStock(material.stock, req.quantity)

    outcome = store.fulfill_request(req)
    if outcome is FulfillOutcome.ISSUED:
        log.info("request #%s issued, %s %s of %s", req.id, req.quantity, material.unit, material.name)
        return f"Issued {req.quantity} {material.unit} of {material.name} for request #{req.id}."
    if outcome is FulfillOutcome.ALREADY_ISSUED:
        log.warning("request #%s was issued concurrently", req.id)
        store.reload()
        return f"Request #{req.id} was already issued."

    # another writer changed the data between our read and the update
    store.reload()
    if outcome is FulfillOutcome.MISSING_REQUEST:
        raise NotFound("request", req.id)
    material = store.get_material(req.material_id)
    if outcome is FulfillOutcome.MISSING_MATERIAL or material is None:
        raise NotFound("material", req.material_id)
    log.warning("request #%s lost a stock race: stock now %s", req.id, material.stock)
    raise InsufficientStock(material.stock, req.quantity)
