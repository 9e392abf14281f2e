from .Errors import Forbidden


def require_role(actor: dict, *roles: str):
    """Raise Forbidden unless the acting user has one of `roles`."""
    if actor.get("role") not in roles:
        raise Forbidden(f"User role {actor.get('role')} is not authorized to access this route")


def is_owner(actor: dict, resource: dict, owner_field: str) -> bool:
    owner = resource.get(owner_field)
    if isinstance(owner, dict):
        owner = owner.get("_id")
    return owner is not None and str(owner) == str(actor.get("id"))


def ensure_owner(actor: dict, resource: dict, owner_field: str, action: str):
    """
    Raise Forbidden unless `actor` owns `resource` through `owner_field`.
    `action` completes the message "Not authorized to ...".
    """
    if not is_owner(actor, resource, owner_field):
        raise Forbidden(f"Not authorized to {action}")
