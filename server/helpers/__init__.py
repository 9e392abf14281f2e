from .DocumentSerializer import DocumentSerializerVisitor
from .PasswordHashingStrategy import PasswordHashingStrategy
from .Ownership import require_role, is_owner, ensure_owner
from .Errors import (
    AppError,
    ValidationError,
    InvalidState,
    Conflict,
    CapacityExceeded,
    Unauthenticated,
    Forbidden,
    NotFound,
    InternalError,
)

__all__ = [
    'DocumentSerializerVisitor',
    'PasswordHashingStrategy',
    'require_role',
    'is_owner',
    'ensure_owner',
    'AppError',
    'ValidationError',
    'InvalidState',
    'Conflict',
    'CapacityExceeded',
    'Unauthenticated',
    'Forbidden',
    'NotFound',
    'InternalError'
]
