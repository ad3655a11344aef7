from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    id: int
    name: str


class ExternalStatus(BaseModel):
    status: str
    timestamp: str


class ProcessedDataResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    users: list[UserOut]
    metadata: ExternalStatus
    processed_at: str = Field(alias="processedAt")
