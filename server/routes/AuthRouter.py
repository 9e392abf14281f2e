import logging
from datetime import datetime
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError

from database.DB import get_db
from helpers.Errors import Conflict, Unauthenticated
from helpers.PasswordHashingStrategy import PasswordHashingStrategy
from models.models import UserLogin, UserRegister
from .dependencies import create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

# Helper instances
_password_strategy = PasswordHashingStrategy()


def _public_user(user: dict) -> dict:
    user = dict(user)
    user.pop("password", None)
    return user


@router.post('/register')
async def register(user_data: UserRegister, db = Depends(get_db)):
    """Create an NGO or volunteer account and return a bearer token"""
    email = user_data.email.lower()
    existing = await db.find_one("users", {"email": email})
    if existing:
        raise Conflict("User already exists")

    user = user_data.model_dump(exclude_none=True)
    user["email"] = email
    user["password"] = _password_strategy.hash(user_data.password)
    user["createdAt"] = datetime.utcnow()
    if user["role"] != "volunteer":
        user.pop("skills", None)

    try:
        result = await db.add("users", user)
    except DuplicateKeyError:
        raise Conflict("User already exists")

    created = _public_user(result["data"])
    logger.info("User %s registered with role %s", email, created["role"])
    token = create_access_token(created["_id"], created["role"])
    return JSONResponse(status_code=201, content={"success": True, "token": token, "data": created})


@router.post('/login')
async def login(credentials: UserLogin, db = Depends(get_db)):
    user = await db.find_one("users", {"email": credentials.email.lower()})
    if not user or not _password_strategy.verify(credentials.password, user.get("password", "")):
        raise Unauthenticated("Invalid credentials")

    logger.info("User %s logged in", user["email"])
    token = create_access_token(user["_id"], user["role"])
    return JSONResponse(content={"success": True, "token": token, "data": _public_user(user)})


@router.get('/me')
async def get_me(user: dict = Depends(get_current_user)):
    return JSONResponse(content={"success": True, "data": user})
