from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from ..restaurants.models import Author


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def current_author(user: dict = Depends(require_user)) -> Author:
    """The logged-in user as a review author."""
    return Author(
        id=user["id"],
        username=user.get("username"),
        given_name=user.get("given_name"),
        family_name=user.get("family_name"),
    )
