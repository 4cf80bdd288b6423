"""
Schema validation for participant and message payloads
"""

from typing import Any, List, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from chatroom.models.api.messages import SendMessageRequest
from chatroom.models.api.participants import JoinRequest


def _collect_errors(model: Type[BaseModel], payload: Any) -> List[str]:
    """Run a pydantic model over the payload and flatten every error."""
    if not isinstance(payload, dict):
        return ["body: must be a JSON object"]

    try:
        model.model_validate(payload)
    except PydanticValidationError as e:
        errors = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "body"
            errors.append(f"{field}: {error['msg']}")
        return errors
    return []


def validate_participant(payload: Any) -> List[str]:
    """
    Validate a join payload

    Args:
        payload: Mapping with a ``name`` field

    Returns:
        Empty list when valid, otherwise one message per violated constraint
    """
    return _collect_errors(JoinRequest, payload)


def validate_message(payload: Any) -> List[str]:
    """
    Validate a post/edit payload

    Args:
        payload: Mapping with ``to``, ``text`` and ``type`` fields

    Returns:
        Empty list when valid, otherwise one message per violated constraint
    """
    return _collect_errors(SendMessageRequest, payload)
