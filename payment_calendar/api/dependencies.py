"""Dependency injection for FastAPI endpoints"""

from fastapi import HTTPException, Request
from payment_calendar.config import settings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_owner_id(request: Request) -> str:
    """
    Owning user for this request.

    Authentication happens upstream; the gateway forwards the verified user id
    in a header and every repository read is scoped to it.
    """
    owner_id = request.headers.get(settings.owner_header, "").strip()
    if not owner_id:
        raise HTTPException(status_code=401, detail=f"Missing {settings.owner_header} header")
    return owner_id
