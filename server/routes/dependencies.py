"""
Shared dependency functions for FastAPI routers.
Resolves the bearer token into the acting user and gates routes by role.
"""
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from config.config import SECRET_KEY, JWT_ALGORITHM, TOKEN_EXPIRE_MINUTES
from database.DB import get_db, object_id
from helpers.Errors import Unauthenticated
from helpers.Ownership import require_role

security = HTTPBearer(auto_error=False)

# never leaves the users collection
USER_PROJECTION = {"password": 0}


def create_access_token(user_id: str, role: str) -> str:
    payload = {
        "sub": user_id,
        "role": role,
        "exp": datetime.utcnow() + timedelta(minutes=TOKEN_EXPIRE_MINUTES)
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_access_token(token: str):
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db = Depends(get_db)
):
    """
    Dependency to get the currently authenticated user from the bearer token.
    Raises Unauthenticated if the token is missing, invalid or expired, or if
    its user no longer exists.
    """
    if credentials is None:
        raise Unauthenticated("Not authorized to access this route")

    payload = verify_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise Unauthenticated("Not authorized to access this route")

    oid = object_id(payload["sub"])
    user = await db.find_one("users", {"_id": oid}, USER_PROJECTION) if oid else None
    if not user:
        raise Unauthenticated("User no longer exists")
    return user


def authorize(*roles: str):
    """
    Dependency factory requiring the current user to have one of `roles`.
    Raises Forbidden otherwise.
    """
    async def role_checker(user: dict = Depends(get_current_user)):
        require_role(user, *roles)
        return user

    return role_checker


require_ngo = authorize("ngo")
require_volunteer = authorize("volunteer")
