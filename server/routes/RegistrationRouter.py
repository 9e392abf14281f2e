from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from database.DB import get_db
from models.models import RegistrationCreate, RegistrationStatusUpdate
from services import RegistrationService
from .dependencies import require_ngo, require_volunteer

router = APIRouter()


# Volunteer routes
@router.post('')
async def create_registration(payload: RegistrationCreate, volunteer: dict = Depends(require_volunteer), db = Depends(get_db)):
    """Register the logged in volunteer for an event"""
    registration = await RegistrationService.create_registration(db, volunteer, payload)
    return JSONResponse(status_code=201, content={"success": True, "data": registration})


@router.get('/myregistrations')
async def get_my_registrations(volunteer: dict = Depends(require_volunteer), db = Depends(get_db)):
    registrations = await RegistrationService.list_my_registrations(db, volunteer)
    return JSONResponse(content={"success": True, "count": len(registrations), "data": registrations})


@router.delete('/{registration_id}')
async def cancel_registration(registration_id: str, volunteer: dict = Depends(require_volunteer), db = Depends(get_db)):
    """Cancel one of the volunteer's own registrations"""
    data = await RegistrationService.cancel_registration(db, volunteer, registration_id)
    return JSONResponse(content={"success": True, "data": data})


# NGO routes
@router.get('/event/{event_id}')
async def get_event_registrations(event_id: str, ngo_user: dict = Depends(require_ngo), db = Depends(get_db)):
    """Get all registrations for an event (owning NGO only)"""
    registrations = await RegistrationService.list_event_registrations(db, ngo_user, event_id)
    return JSONResponse(content={"success": True, "count": len(registrations), "data": registrations})


@router.put('/{registration_id}')
async def update_registration_status(
    registration_id: str,
    payload: RegistrationStatusUpdate,
    ngo_user: dict = Depends(require_ngo),
    db = Depends(get_db)
):
    """Approve, reject or mark attendance on a registration (owning NGO only)"""
    registration = await RegistrationService.update_registration_status(db, ngo_user, registration_id, payload.status)
    return JSONResponse(content={"success": True, "data": registration})
