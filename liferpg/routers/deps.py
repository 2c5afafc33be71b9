"""
Request-scoped dependencies shared by the routers.

Identity is the `X-User-Id` header; there is no authentication layer.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from liferpg.core.errors import NotFoundError, UnauthorizedError
from liferpg.db.base import get_db
from liferpg.models.user import User
from liferpg.services.users import get_user


def get_current_user(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> User:
    if not x_user_id or not x_user_id.strip().isdigit():
        raise UnauthorizedError()
    try:
        return get_user(db, int(x_user_id))
    except NotFoundError:
        raise UnauthorizedError() from None
