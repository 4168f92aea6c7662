from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from gamerlink.models.play_request import PlayRequestStatus


class PlayRequestCreate(BaseModel):
    to_user_id: UUID
    game: str = Field(min_length=1, max_length=120)
    message: Optional[str] = None


class PlayRequestUpdate(BaseModel):
    status: Literal["accepted", "rejected"]


class PlayRequestRead(BaseModel):
    id: UUID
    from_user_id: UUID
    to_user_id: UUID
    game: str
    message: Optional[str] = None
    status: PlayRequestStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
