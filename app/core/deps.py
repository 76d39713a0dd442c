# /app/core/deps.py

"""
FastAPI dependencies for the two collaborators the admin core relies on:
role-based authorization and CSRF verification.

Authentication itself happens upstream. The gateway in front of this API
forwards the signed-in identity as `X-User-Id` / `X-User-Role` headers, and
these dependencies turn it into an explicit `ActorContext` that every service
call receives.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.core import security
from app.models.user_model import ActorContext, Role


def get_actor_context(
    x_user_id: Optional[int] = Header(default=None),
    x_user_role: Optional[int] = Header(default=None),
) -> ActorContext:
    if x_user_id is None or x_user_role is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        role = Role(x_user_role)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown role")
    return ActorContext(user_id=x_user_id, role=role)


def require_role(role: Role):
    """Builds a dependency that rejects any actor whose role is not `role`."""

    def _dependency(actor: ActorContext = Depends(get_actor_context)) -> ActorContext:
        if actor.role != role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return actor

    return _dependency


require_admin = require_role(Role.ADMIN)


def verify_csrf(x_csrf_token: Optional[str] = Header(default=None)) -> None:
    if not x_csrf_token or not security.verify_token(x_csrf_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid form submission. Please try again."
        )
