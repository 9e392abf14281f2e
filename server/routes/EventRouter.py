from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Optional

from database.DB import get_db
from models.models import EventCreate, EventStatus, EventType, EventUpdate
from services import EventService
from .dependencies import require_ngo

router = APIRouter()


@router.get('')
async def get_events(
    status: Optional[EventStatus] = Query(None),
    eventType: Optional[EventType] = Query(None),
    city: Optional[str] = Query(None),
    db = Depends(get_db)
):
    """Get all events, optionally filtered by status, type and city"""
    events = await EventService.list_events(db, status=status, event_type=eventType, city=city)
    return JSONResponse(content={"success": True, "count": len(events), "data": events})


@router.get('/ngo/myevents')
async def get_my_events(ngo_user: dict = Depends(require_ngo), db = Depends(get_db)):
    """Get events created by the logged in NGO (NGO only)"""
    events = await EventService.list_my_events(db, ngo_user)
    return JSONResponse(content={"success": True, "count": len(events), "data": events})


@router.get('/{event_id}')
async def get_event(event_id: str, db = Depends(get_db)):
    event = await EventService.get_event(db, event_id)
    return JSONResponse(content={"success": True, "data": event})


@router.post('')
async def create_event(event_data: EventCreate, ngo_user: dict = Depends(require_ngo), db = Depends(get_db)):
    """Create a new event owned by the logged in NGO (NGO only)"""
    event = await EventService.create_event(db, ngo_user, event_data)
    return JSONResponse(status_code=201, content={"success": True, "data": event})


@router.put('/{event_id}')
async def update_event(event_id: str, event_data: EventUpdate, ngo_user: dict = Depends(require_ngo), db = Depends(get_db)):
    """Update an existing event (owning NGO only)"""
    event = await EventService.update_event(db, ngo_user, event_id, event_data)
    return JSONResponse(content={"success": True, "data": event})


@router.delete('/{event_id}')
async def delete_event(event_id: str, ngo_user: dict = Depends(require_ngo), db = Depends(get_db)):
    """Delete an event and its registrations (owning NGO only)"""
    data = await EventService.delete_event(db, ngo_user, event_id)
    return JSONResponse(content={"success": True, "data": data})
