"""Page revalidation schemas."""

from pydantic import BaseModel


class RevalidationSnapshot(BaseModel):
    """Last revalidation time (ISO-8601) per page path."""
    paths: dict[str, str]
