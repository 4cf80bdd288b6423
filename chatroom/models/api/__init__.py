# API models for request/response contracts
from .messages import (
    JoinResponse,
    MessageResponse,
    SendMessageRequest,
)
from .participants import JoinRequest, ParticipantResponse

__all__ = [
    "JoinRequest",
    "JoinResponse",
    "MessageResponse",
    "ParticipantResponse",
    "SendMessageRequest",
]
