"""
Response envelope shared by all routes.
"""
from typing import Any, Dict, Optional


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Wrap a payload in the success envelope.

    Args:
        data: Payload returned under ``data``
        message: Optional human-readable note

    Returns:
        dict: ``{"status": "success", "data": ..., "message": ...}``
    """
    body: Dict[str, Any] = {"status": "success", "data": data}
    if message:
        body["message"] = message
    return body
