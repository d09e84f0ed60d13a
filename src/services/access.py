"""Role checks shared by the instructor-facing services."""

from ..exceptions import AccessDeniedError, NotAuthenticatedError
from ..utils.persistence import BackendGateway

STAFF_ROLES = frozenset({"instructor", "admin"})


def is_staff(roles) -> bool:
    return any(role in STAFF_ROLES for role in roles)


def require_staff(gateway: BackendGateway) -> str:
    """
    Ensure the signed-in user is an instructor or admin.

    Returns:
        The user's ID

    Raises:
        NotAuthenticatedError: If nobody is signed in
        AccessDeniedError: If the user lacks instructor privileges
    """
    user_id = gateway.current_user_id()
    if not user_id:
        raise NotAuthenticatedError("Sign in to continue")
    if not is_staff(gateway.get_user_roles(user_id)):
        raise AccessDeniedError("Access denied. Instructor privileges required.")
    return user_id
