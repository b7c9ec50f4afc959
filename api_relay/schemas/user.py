"""
Pydantic schemas for users.
"""

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    username: str = Field(min_length=1)
    password: str


class UserResponse(BaseModel):
    id: int
    username: str
    password: str

    model_config = ConfigDict(from_attributes=True)
