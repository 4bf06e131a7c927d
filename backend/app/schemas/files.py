"""File schemas: request bodies and usage statistics."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RenameRequest(BaseModel):
    name: str = Field(min_length=1)
    extension: str = ""
    path: str = "/"


class ShareRequest(BaseModel):
    """Full replacement list of collaborator emails."""
    emails: list[EmailStr] = []
    path: str = "/"


class TypeUsage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: int = 0
    latest_date: str = Field(default="", alias="latestDate")


class TotalSpace(BaseModel):
    """Per-type usage against the fixed quota."""
    image: TypeUsage
    document: TypeUsage
    video: TypeUsage
    audio: TypeUsage
    other: TypeUsage
    used: int
    all: int


class UsageSummaryItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    size: int
    latest_date: str = Field(alias="latestDate")
    url: str


class UsageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_space: TotalSpace = Field(alias="totalSpace")
    used_percent: float = Field(alias="usedPercent")
    used_human: str = Field(alias="usedHuman")
    summary: list[UsageSummaryItem]
