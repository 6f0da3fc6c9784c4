"""Database configuration schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class DatabaseConfigRequest(BaseModel):
    connection_string: str = Field(min_length=1)


class DatabaseStatusRead(BaseModel):
    connected: bool
    has_url: bool
    provider: Optional[str] = None


class DatabaseConfigResponse(DatabaseStatusRead):
    success: bool
    message: str
