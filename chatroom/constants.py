"""
Constants for the chat service
"""

# Recipient value meaning "every viewer"
BROADCAST_TARGET = "Todos"

# Message types
MESSAGE_TYPE_PUBLIC = "message"
MESSAGE_TYPE_PRIVATE = "private_message"
MESSAGE_TYPE_STATUS = "status"

# Types a participant may submit; status messages are system generated
USER_MESSAGE_TYPES = (MESSAGE_TYPE_PUBLIC, MESSAGE_TYPE_PRIVATE)

# Status message texts
JOIN_TEXT = "entra na sala..."
LEAVE_TEXT = "sai da sala..."

# Message timestamps are local wall-clock time
TIME_FORMAT = "%H:%M:%S"

# Caller identity header
IDENTITY_HEADER = "User"

# Column sizes
MAX_NAME_LENGTH = 255
