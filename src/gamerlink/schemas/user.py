from pydantic import BaseModel, ConfigDict
from uuid import UUID


class UserSummary(BaseModel):
    """Public identity attached to messages and conversations."""
    id: UUID
    username: str
    display_name: str

    model_config = ConfigDict(from_attributes=True)
