from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional
from uuid import UUID


class NotificationRead(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    body: Optional[str] = None
    category: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
