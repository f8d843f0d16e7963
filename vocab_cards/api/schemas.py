from __future__ import annotations

from pydantic import BaseModel, Field


class WordPairPayload(BaseModel):
    eng: str
    rus: str
    display: int = Field(default=1, ge=0, le=1)


class SaveResponse(BaseModel):
    success: bool
    message: str


class HealthResponse(BaseModel):
    status: str
    port: int
