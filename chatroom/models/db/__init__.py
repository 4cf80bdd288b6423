# SQLAlchemy database models
from .message_model import MessageModel
from .participant_model import ParticipantModel

__all__ = ["MessageModel", "ParticipantModel"]
