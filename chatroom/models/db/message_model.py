from sqlalchemy import CheckConstraint, Column, Integer, String, Text

from chatroom.constants import MAX_NAME_LENGTH
from chatroom.database import Base


class MessageModel(Base):
    """SQLAlchemy model for messages table."""

    __tablename__ = "messages"

    # Monotonic primary key doubles as insertion order
    id = Column(Integer, primary_key=True, autoincrement=True)
    from_name = Column("from", String(MAX_NAME_LENGTH), nullable=False, index=True)
    to_name = Column("to", String(MAX_NAME_LENGTH), nullable=False, index=True)
    text = Column(Text, nullable=False)
    type = Column(String(20), nullable=False)
    time = Column(String(8), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "type IN ('message', 'private_message', 'status')",
            name="ck_messages_type",
        ),
        # Never hand out the id of a deleted message again
        {"sqlite_autoincrement": True},
    )
