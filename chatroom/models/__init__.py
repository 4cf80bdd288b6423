# Export all models
from .api import (
    JoinRequest,
    JoinResponse,
    MessageResponse,
    ParticipantResponse,
    SendMessageRequest,
)
from .db import (
    MessageModel,
    ParticipantModel,
)

__all__ = [
    # API models
    "JoinRequest",
    "JoinResponse",
    "MessageResponse",
    "ParticipantResponse",
    "SendMessageRequest",
    # DB models
    "MessageModel",
    "ParticipantModel",
]
