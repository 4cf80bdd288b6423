from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from chatroom.constants import MAX_NAME_LENGTH
from chatroom.models.api.participants import ParticipantResponse


class SendMessageRequest(BaseModel):
    """Request model for posting or editing a message."""

    to: StrictStr = Field(
        ...,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description="Recipient name or 'Todos'",
    )
    text: StrictStr = Field(..., min_length=1, description="Message content")
    type: Literal["message", "private_message"] = Field(
        ..., description="'message' (public) or 'private_message'"
    )


class MessageResponse(BaseModel):
    """Response model for message data."""

    id: int
    from_: str = Field(..., alias="from")
    to: str
    text: str
    type: str  # 'message', 'private_message', 'status'
    time: str  # HH:MM:SS, local time

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class JoinResponse(BaseModel):
    """Result of a successful join: the new participant and its status notice."""

    participant: ParticipantResponse
    message: MessageResponse
