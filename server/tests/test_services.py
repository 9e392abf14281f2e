"""
Service-level tests run directly against the store handle
"""
import asyncio
from datetime import date

import pytest
from bson import ObjectId

from helpers.Errors import CapacityExceeded, Conflict, Forbidden, InvalidState, NotFound
from helpers.Ownership import ensure_owner, is_owner, require_role
from models.models import EventCreate, EventUpdate, RegistrationCreate
from services import EventService, RegistrationService


def make_actor(role):
    return {"id": str(ObjectId()), "role": role}


def event_payload(**overrides):
    data = {
        "title": "Tree Plantation Campaign",
        "description": "Plant trees across the city.",
        "eventType": "tree-plantation",
        "location": {"address": "Model Colony Park", "city": "Lahore"},
        "date": date(2030, 2, 1),
        "startTime": "08:00",
        "endTime": "12:00",
        "volunteersNeeded": 2,
    }
    data.update(overrides)
    return EventCreate(**data)


def test_require_role():
    require_role({"id": "1", "role": "ngo"}, "ngo")
    with pytest.raises(Forbidden):
        require_role({"id": "1", "role": "volunteer"}, "ngo")


def test_ownership_predicate():
    actor = {"id": "abc", "role": "ngo"}
    assert is_owner(actor, {"ngo": "abc"}, "ngo")
    assert is_owner(actor, {"ngo": {"_id": "abc", "name": "Green Earth"}}, "ngo")
    assert not is_owner(actor, {"ngo": "xyz"}, "ngo")
    assert not is_owner(actor, {}, "ngo")

    with pytest.raises(Forbidden) as exc:
        ensure_owner(actor, {"volunteer": "xyz"}, "volunteer", "cancel this registration")
    assert exc.value.message == "Not authorized to cancel this registration"


@pytest.mark.anyio
async def test_create_event_requires_ngo_role(store):
    with pytest.raises(Forbidden):
        await EventService.create_event(store, make_actor("volunteer"), event_payload())


@pytest.mark.anyio
async def test_update_event_partial(store):
    ngo = make_actor("ngo")
    event = await EventService.create_event(store, ngo, event_payload())

    updated = await EventService.update_event(store, ngo, event["_id"], EventUpdate(date=date(2030, 3, 1)))
    assert updated["date"] == "2030-03-01T00:00:00"
    assert updated["title"] == "Tree Plantation Campaign"

    unchanged = await EventService.update_event(store, ngo, event["_id"], EventUpdate())
    assert unchanged["date"] == "2030-03-01T00:00:00"


@pytest.mark.anyio
async def test_invalid_state_wins_over_capacity(store):
    ngo = make_actor("ngo")
    event = await EventService.create_event(store, ngo, event_payload(status="completed", volunteersNeeded=50))

    with pytest.raises(InvalidState):
        await RegistrationService.create_registration(store, make_actor("volunteer"), RegistrationCreate(eventId=event["_id"]))


@pytest.mark.anyio
async def test_capacity_counts_only_pending_and_approved(store):
    ngo = make_actor("ngo")
    event = await EventService.create_event(store, ngo, event_payload(volunteersNeeded=2))
    first, second, third = (make_actor("volunteer") for _ in range(3))

    registration = await RegistrationService.create_registration(store, first, RegistrationCreate(eventId=event["_id"]))
    await RegistrationService.create_registration(store, second, RegistrationCreate(eventId=event["_id"]))
    with pytest.raises(CapacityExceeded):
        await RegistrationService.create_registration(store, third, RegistrationCreate(eventId=event["_id"]))

    await RegistrationService.update_registration_status(store, ngo, registration["_id"], "no-show")
    created = await RegistrationService.create_registration(store, third, RegistrationCreate(eventId=event["_id"]))
    assert created["status"] == "pending"


@pytest.mark.anyio
async def test_duplicate_key_maps_to_conflict(store, monkeypatch):
    """The unique index rejects a duplicate even when the pre-check misses it."""
    ngo = make_actor("ngo")
    volunteer = make_actor("volunteer")
    event = await EventService.create_event(store, ngo, event_payload())
    await RegistrationService.create_registration(store, volunteer, RegistrationCreate(eventId=event["_id"]))

    original_find_one = store.find_one

    async def racing_find_one(collection_name, query, projection=None):
        # simulate a concurrent request that has not seen the first insert
        if collection_name == "registrations" and "volunteer" in query:
            return None
        return await original_find_one(collection_name, query, projection)

    monkeypatch.setattr(store, "find_one", racing_find_one)

    with pytest.raises(Conflict) as exc:
        await RegistrationService.create_registration(store, volunteer, RegistrationCreate(eventId=event["_id"]))
    assert exc.value.message == "You have already registered for this event"
    assert await store.count("registrations", {"event": ObjectId(event["_id"])}) == 1


@pytest.mark.anyio
async def test_back_to_back_duplicate_registrations(store):
    """Two gathered registrations by one volunteer yield one success and one Conflict."""
    # the in-memory store never yields between awaits, so the second call is rejected
    # by the pre-check; test_duplicate_key_maps_to_conflict covers the unique index
    ngo = make_actor("ngo")
    volunteer = make_actor("volunteer")
    event = await EventService.create_event(store, ngo, event_payload(volunteersNeeded=10))
    payload = RegistrationCreate(eventId=event["_id"])

    results = await asyncio.gather(
        RegistrationService.create_registration(store, volunteer, payload),
        RegistrationService.create_registration(store, volunteer, payload),
        return_exceptions=True,
    )

    successes = [result for result in results if isinstance(result, dict)]
    conflicts = [result for result in results if isinstance(result, Conflict)]
    assert len(successes) == 1
    assert len(conflicts) == 1


@pytest.mark.anyio
async def test_delete_event_leaves_no_registrations(store):
    ngo = make_actor("ngo")
    event = await EventService.create_event(store, ngo, event_payload(volunteersNeeded=5))
    for _ in range(4):
        await RegistrationService.create_registration(store, make_actor("volunteer"), RegistrationCreate(eventId=event["_id"]))

    assert await EventService.delete_event(store, ngo, event["_id"]) == {}
    assert await store.count("registrations", {"event": ObjectId(event["_id"])}) == 0

    with pytest.raises(NotFound):
        await EventService.get_event(store, event["_id"])


@pytest.mark.anyio
async def test_delete_event_by_other_ngo_keeps_everything(store):
    ngo = make_actor("ngo")
    event = await EventService.create_event(store, ngo, event_payload())
    await RegistrationService.create_registration(store, make_actor("volunteer"), RegistrationCreate(eventId=event["_id"]))

    with pytest.raises(Forbidden):
        await EventService.delete_event(store, make_actor("ngo"), event["_id"])
    assert await store.count("registrations", {"event": ObjectId(event["_id"])}) == 1


@pytest.mark.anyio
async def test_status_update_on_orphaned_registration(store):
    ngo = make_actor("ngo")
    volunteer = make_actor("volunteer")
    event = await EventService.create_event(store, ngo, event_payload())
    registration = await RegistrationService.create_registration(store, volunteer, RegistrationCreate(eventId=event["_id"]))
    await store.delete("events", {"_id": ObjectId(event["_id"])})

    with pytest.raises(NotFound):
        await RegistrationService.update_registration_status(store, ngo, registration["_id"], "approved")
