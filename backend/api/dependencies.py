"""Shared FastAPI dependencies for the Aegis routers."""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from backend.database.connection import get_db_session
from backend.database.models import User
from backend.database.repository import SecurityRepository

logger = logging.getLogger(__name__)


def get_repository(db: Session = Depends(get_db_session)) -> SecurityRepository:
    """Bind a SecurityRepository to the request's session."""
    return SecurityRepository(db)


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    repo: SecurityRepository = Depends(get_repository),
) -> User:
    """Resolve the calling user from the ``X-User-Id`` header.

    Raises:
        HTTPException: 401 when the header is missing or names no user.
    """
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header.")

    user = repo.get_user(x_user_id)
    if not user or not user.is_active:
        logger.warning(f"Rejecting request for unknown user '{x_user_id}'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user.")

    return user
