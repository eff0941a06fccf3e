"""
Header-based authorization gate.

Every HashText route depends on `require_user`. The caller identifies
itself with the X-HashText-User-ID header; the token must belong to an
existing user. Missing, empty and unknown tokens all get a bare 401 and
the route handler never runs.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader

from .errors import UnauthorizedError
from .models import AuthenticatedUser
from .service import HashTextService, get_service

USER_ID_HEADER = "X-HashText-User-ID"

# auto_error=False so a missing header reaches us and gets an empty 401
user_id_header = APIKeyHeader(name=USER_ID_HEADER, auto_error=False)


def require_user(
    user_id: Optional[str] = Depends(user_id_header),
    service: HashTextService = Depends(get_service),
) -> AuthenticatedUser:
    """
    Authorize the request.

    Returns:
        The identity to pass to the operation

    Raises:
        UnauthorizedError: token missing, empty or unknown
        InternalError: the user lookup failed
    """
    user = service.authorize(user_id)
    if user is None:
        raise UnauthorizedError()
    return user
