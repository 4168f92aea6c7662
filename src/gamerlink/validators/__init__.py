from .input_validators import (
    require_uuid,
    require_message_id,
    require_distinct_participants,
    require_text,
)

__all__ = [
    "require_uuid",
    "require_message_id",
    "require_distinct_participants",
    "require_text",
]
