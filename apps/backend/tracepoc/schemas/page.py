from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tracepoc.schemas.data import ProcessedDataResponse


class StaticConfig(BaseModel):
    theme: str
    version: str
    features: list[str]


class StaticSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    items: list[str]
    config: StaticConfig
    rendered_at: str = Field(alias="renderedAt")


class UserPreferences(BaseModel):
    notifications: bool
    theme: str


class SessionUserData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    user_id: int = Field(alias="userId")
    preferences: UserPreferences


class RealtimeStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    requests: int
    active_users: int = Field(alias="activeUsers")


class PersonalizedContent(BaseModel):
    greeting: str
    recommendations: list[str]


class DynamicSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_data: SessionUserData = Field(alias="userData")
    realtime_data: RealtimeStats = Field(alias="realtimeData")
    personalized_content: PersonalizedContent = Field(alias="personalizedContent")


class PageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    api_data: ProcessedDataResponse = Field(alias="apiData")
    static_section: StaticSection = Field(alias="staticSection")
    dynamic_section: DynamicSection = Field(alias="dynamicSection")
