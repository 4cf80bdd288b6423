from sqlalchemy import BigInteger, Column, Integer, String

from chatroom.constants import MAX_NAME_LENGTH
from chatroom.database import Base


class ParticipantModel(Base):
    """SQLAlchemy model for participants table."""

    __tablename__ = "participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # The unique index is what makes concurrent joins with one name safe
    name = Column(String(MAX_NAME_LENGTH), nullable=False, unique=True)
    # Epoch milliseconds of the last join or heartbeat
    last_status = Column(BigInteger, nullable=False, index=True)
