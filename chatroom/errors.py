"""Error taxonomy shared by the services and the HTTP layer."""

from typing import List, Optional, Union


class ChatError(Exception):
    """Base class for errors the HTTP layer reports to the caller."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[Union[str, List[str]]] = None):
        self.detail = detail if detail is not None else self.default_detail
        message = self.detail if isinstance(self.detail, str) else "; ".join(self.detail)
        super().__init__(message)


class ValidationError(ChatError):
    """One or more fields failed schema validation."""

    status_code = 422
    default_detail = "Invalid payload"

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(self.errors)


class DuplicateName(ChatError):
    status_code = 409
    default_detail = "Participant name already in use"


class UnknownSender(ChatError):
    status_code = 422
    default_detail = "Sender is not an active participant"


class NotFound(ChatError):
    status_code = 404
    default_detail = "Not found"


class Forbidden(ChatError):
    # Authorship mismatch is reported as 401
    status_code = 401
    default_detail = "Only the author may change this message"


class InvalidLimit(ChatError):
    status_code = 422
    default_detail = "Limit must be a positive integer"


class StoreError(ChatError):
    """Persistence failure. The driver exception is kept as ``__cause__``."""

    status_code = 500


class DuplicateKeyError(StoreError):
    """A unique constraint rejected an insert."""
