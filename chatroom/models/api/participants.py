from pydantic import BaseModel, ConfigDict, Field, StrictStr

from chatroom.constants import MAX_NAME_LENGTH


class JoinRequest(BaseModel):
    """Request model for joining the room."""

    name: StrictStr = Field(
        ..., min_length=1, max_length=MAX_NAME_LENGTH, description="Participant name"
    )


class ParticipantResponse(BaseModel):
    """Response model for participant data."""

    name: str
    last_status: int = Field(
        ..., alias="lastStatus", description="Epoch milliseconds of last activity"
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
