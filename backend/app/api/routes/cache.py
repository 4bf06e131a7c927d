"""Page revalidation signal: read by the page layer to purge stale pages."""

from fastapi import APIRouter

from app.schemas.cache import RevalidationSnapshot
from app.services import get_revalidator

router = APIRouter()


@router.get("/revalidations", response_model=RevalidationSnapshot)
async def revalidations():
    """Last revalidation time per page path."""
    return RevalidationSnapshot(paths=get_revalidator().snapshot())
