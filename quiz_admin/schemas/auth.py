from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TeamProfileUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="allow")

    team_name: Optional[str] = Field(None, min_length=1, max_length=255)


class TeamProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    team_name: Optional[str] = None
    profile_picture: Optional[str] = None
