# Repository classes for database operations
from .base_repository import BaseRepository
from .message_repository import MessageRepository
from .participant_repository import ParticipantRepository

__all__ = [
    "BaseRepository",
    "MessageRepository",
    "ParticipantRepository",
]
