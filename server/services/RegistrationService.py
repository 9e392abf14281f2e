import logging
from datetime import datetime

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from database.DB import object_id
from helpers.Errors import CapacityExceeded, Conflict, InvalidState, NotFound
from helpers.Ownership import ensure_owner, require_role
from models.models import ACTIVE_REGISTRATION_STATUSES, RegistrationCreate
from .EventService import get_event_or_404

logger = logging.getLogger(__name__)

VOLUNTEER_PROFILE = {"name": 1, "email": 1, "phone": 1, "skills": 1, "availability": 1}
EVENT_SUMMARY = {
    "title": 1,
    "description": 1,
    "date": 1,
    "startTime": 1,
    "endTime": 1,
    "location": 1,
    "eventType": 1,
    "status": 1,
    "ngo": 1,
}

ALREADY_REGISTERED = "You have already registered for this event"


async def get_registration_or_404(db, registration_id) -> dict:
    oid = object_id(registration_id)
    registration = await db.find_one("registrations", {"_id": oid}) if oid else None
    if not registration:
        raise NotFound("Registration not found")
    return registration


async def create_registration(db, actor: dict, payload: RegistrationCreate) -> dict:
    require_role(actor, "volunteer")

    event = await get_event_or_404(db, payload.eventId)
    if event.get("status") != "upcoming":
        raise InvalidState("Cannot register for this event")

    event_oid = ObjectId(event["_id"])
    volunteer_oid = ObjectId(actor["id"])

    existing = await db.find_one("registrations", {"event": event_oid, "volunteer": volunteer_oid})
    if existing:
        raise Conflict(ALREADY_REGISTERED)

    # best effort: concurrent requests may over-admit, the NGO resolves it when approving
    taken = await db.count("registrations", {
        "event": event_oid,
        "status": {"$in": ACTIVE_REGISTRATION_STATUSES},
    })
    if taken >= event["volunteersNeeded"]:
        raise CapacityExceeded("No spots available for this event")

    now = datetime.utcnow()
    registration = {
        "event": event_oid,
        "volunteer": volunteer_oid,
        "status": "pending",
        "registeredAt": now,
        "updatedAt": now,
    }
    if payload.message is not None:
        registration["message"] = payload.message

    try:
        result = await db.add("registrations", registration)
    except DuplicateKeyError:
        logger.warning("Duplicate registration rejected by index: event %s, volunteer %s", event["_id"], actor["id"])
        raise Conflict(ALREADY_REGISTERED)

    logger.info("Volunteer %s registered for event %s", actor["id"], event["_id"])
    return result["data"]


async def list_event_registrations(db, actor: dict, event_id) -> list:
    event = await get_event_or_404(db, event_id)
    ensure_owner(actor, event, "ngo", "view these registrations")

    result = await db.find_many("registrations", {"event": ObjectId(event["_id"])})
    return await db.populate(result["data"], "volunteer", "users", VOLUNTEER_PROFILE)


async def list_my_registrations(db, actor: dict) -> list:
    require_role(actor, "volunteer")

    result = await db.find_many(
        "registrations",
        {"volunteer": ObjectId(actor["id"])},
        sort=[("registeredAt", -1)],
    )
    registrations = result["data"]
    await db.populate(registrations, "event", "events", EVENT_SUMMARY)

    events = [registration["event"] for registration in registrations if registration.get("event")]
    await db.populate(events, "ngo", "users", {"organizationName": 1})
    return registrations


async def update_registration_status(db, actor: dict, registration_id, status: str) -> dict:
    """
    Set a registration's status. Any status may follow any other: the owning
    NGO can, for example, move a rejected volunteer back to pending.
    """
    registration = await get_registration_or_404(db, registration_id)
    event = await get_event_or_404(db, registration["event"])
    ensure_owner(actor, event, "ngo", "update this registration")

    updated = await db.update(
        "registrations",
        {"_id": ObjectId(registration["_id"])},
        {"$set": {"status": status, "updatedAt": datetime.utcnow()}},
    )
    if not updated:
        raise NotFound("Registration not found")

    logger.info("Registration %s moved from %s to %s by NGO %s",
                registration["_id"], registration.get("status"), status, actor["id"])
    await db.populate([updated], "volunteer", "users", VOLUNTEER_PROFILE)
    return updated


async def cancel_registration(db, actor: dict, registration_id) -> dict:
    registration = await get_registration_or_404(db, registration_id)
    ensure_owner(actor, registration, "volunteer", "cancel this registration")

    await db.delete("registrations", {"_id": ObjectId(registration["_id"])})
    logger.info("Registration %s cancelled by volunteer %s", registration["_id"], actor["id"])
    return {}
