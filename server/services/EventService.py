import logging
import re
from datetime import datetime, time
from typing import Optional

from bson import ObjectId

from database.DB import object_id
from helpers.Errors import NotFound
from helpers.Ownership import ensure_owner, require_role
from models.models import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

NGO_SUMMARY = {"name": 1, "organizationName": 1, "email": 1}
NGO_PROFILE = {
    "name": 1,
    "organizationName": 1,
    "organizationDescription": 1,
    "email": 1,
    "phone": 1,
}


def _to_storage(fields: dict) -> dict:
    # BSON has no calendar-date type; events are stored at midnight
    if fields.get("date") is not None:
        fields["date"] = datetime.combine(fields["date"], time.min)
    return fields


async def attach_registrations(db, events: list) -> list:
    """Attach each event's registrations, looked up by their `event` reference."""
    ids = [ObjectId(event["_id"]) for event in events]
    if not ids:
        return events

    result = await db.find_many("registrations", {"event": {"$in": ids}})
    by_event = {}
    for registration in result["data"]:
        by_event.setdefault(registration["event"], []).append(registration)

    for event in events:
        event["registrations"] = by_event.get(event["_id"], [])
    return events


async def get_event_or_404(db, event_id) -> dict:
    oid = object_id(event_id)
    event = await db.find_one("events", {"_id": oid}) if oid else None
    if not event:
        raise NotFound("Event not found")
    return event


async def list_events(db, status: Optional[str] = None, event_type: Optional[str] = None,
                      city: Optional[str] = None) -> list:
    query = {}
    if status:
        query["status"] = status
    if event_type:
        query["eventType"] = event_type
    if city:
        query["location.city"] = {"$regex": re.escape(city), "$options": "i"}

    result = await db.find_many("events", query, sort=[("date", 1)])
    events = result["data"]
    await db.populate(events, "ngo", "users", NGO_SUMMARY)
    return await attach_registrations(db, events)


async def get_event(db, event_id) -> dict:
    event = await get_event_or_404(db, event_id)
    await db.populate([event], "ngo", "users", NGO_PROFILE)
    await attach_registrations(db, [event])
    return event


async def create_event(db, actor: dict, payload: EventCreate) -> dict:
    require_role(actor, "ngo")

    event = _to_storage(payload.model_dump(exclude_none=True))
    event["ngo"] = ObjectId(actor["id"])
    event["createdAt"] = datetime.utcnow()

    result = await db.add("events", event)
    logger.info("Event %s created by NGO %s", result["data"]["_id"], actor["id"])
    return result["data"]


async def update_event(db, actor: dict, event_id, payload: EventUpdate) -> dict:
    event = await get_event_or_404(db, event_id)
    ensure_owner(actor, event, "ngo", "update this event")

    changes = _to_storage(payload.model_dump(exclude_none=True))
    if not changes:
        return event

    updated = await db.update("events", {"_id": ObjectId(event["_id"])}, {"$set": changes})
    if not updated:
        raise NotFound("Event not found")

    logger.info("Event %s updated by NGO %s (%s)", event["_id"], actor["id"], ", ".join(sorted(changes)))
    return updated


async def delete_event(db, actor: dict, event_id) -> dict:
    event = await get_event_or_404(db, event_id)
    ensure_owner(actor, event, "ngo", "delete this event")

    oid = ObjectId(event["_id"])
    # registrations go first so a retry after a partial failure still cleans them up
    cascade = await db.delete_many("registrations", {"event": oid})
    await db.delete("events", {"_id": oid})

    logger.info("Event %s deleted by NGO %s with %d registrations", event["_id"], actor["id"], cascade["deleted_count"])
    return {}


async def list_my_events(db, actor: dict) -> list:
    require_role(actor, "ngo")

    result = await db.find_many("events", {"ngo": ObjectId(actor["id"])}, sort=[("date", -1)])
    return await attach_registrations(db, result["data"])
