"""
Response Envelope Handling

The resource API is not consistent about its response shapes:
- Success bodies may be wrapped as {"status": "success", "data": ...}
- Or be the bare object / list
- Folder listings may also arrive paginated as {"results": [...]}
- Error bodies carry their message under one of several keys
"""

from typing import Optional, List, Any
from pydantic import BaseModel

from resource_hub.core.errors import InvalidResponseError

# Keys that carry envelope metadata rather than field errors
ENVELOPE_KEYS = ("status", "message", "detail", "error", "errors", "non_field_errors")


class SuccessEnvelope(BaseModel):
    """
    Wrapped success response.

    Example:
        {
            "status": "success",
            "data": {"uuid": "...", "name": "Slides"}
        }
    """
    status: str
    data: Any = None
    message: Optional[str] = None


def unwrap_object(payload: Any) -> dict:
    """Return the single object carried by a create/update response."""
    if isinstance(payload, dict):
        if payload.get("status") == "success" and payload.get("data"):
            envelope = SuccessEnvelope.model_validate(payload)
            if isinstance(envelope.data, dict):
                return envelope.data
        elif payload.get("uuid"):
            return payload
    raise InvalidResponseError()


def unwrap_list(payload: Any, allow_results: bool = False) -> List[dict]:
    """Return the list carried by a listing response."""
    if isinstance(payload, dict):
        if payload.get("status") == "success" and isinstance(payload.get("data"), list):
            return payload["data"]
        if allow_results and isinstance(payload.get("results"), list):
            return payload["results"]
    elif isinstance(payload, list):
        return payload
    raise InvalidResponseError()


def _join(values: List[Any]) -> str:
    return ", ".join(str(v) for v in values)


def extract_error_message(payload: Any, default: str) -> str:
    """
    Best-effort human readable message from an error body.

    Looks at message, detail, error, errors[], non_field_errors[] and finally
    per-field errors ("name: This field may not be blank").
    """
    if not isinstance(payload, dict):
        return default

    if payload.get("message"):
        return str(payload["message"])
    if payload.get("detail"):
        detail = payload["detail"]
        if isinstance(detail, list):
            # FastAPI style validation details
            return _join(d.get("msg", d) if isinstance(d, dict) else d for d in detail)
        return str(detail)
    if payload.get("error"):
        error = payload["error"]
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return error if isinstance(error, str) else str(error)
    if isinstance(payload.get("errors"), list) and payload["errors"]:
        return _join(payload["errors"])
    if isinstance(payload.get("non_field_errors"), list) and payload["non_field_errors"]:
        return _join(payload["non_field_errors"])

    field_errors = []
    for key, value in payload.items():
        if key in ENVELOPE_KEYS:
            continue
        if isinstance(value, list) and value:
            field_errors.append(f"{key}: {_join(value)}")
        elif isinstance(value, str) and value:
            field_errors.append(f"{key}: {value}")
    if field_errors:
        return "; ".join(field_errors)

    return default


# Common notification messages
class ResponseMessages:
    """Standard user-facing messages for consistency."""

    # Resources
    CREATED = "{resource} created successfully"
    RENAMED = "{resource} renamed successfully"
    DELETED = "{resource} deleted successfully"
    MOVED = "{resource} moved successfully"
    UPLOADED = "{resource} uploaded successfully"

    # Failures with no better server message
    CREATE_FAILED = "Failed to create {resource}. Please try again."
    DELETE_FAILED = "Failed to delete {resource}. Please try again."
    FETCH_FAILED = "Failed to fetch {resource}. Please try again."
    UPLOAD_FAILED = "Failed to upload {resource}. Please try again."
