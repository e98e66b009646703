from rest_framework.response import Response
from rest_framework import status


def api_success(message=None, status_code=status.HTTP_200_OK, **payload):
    """
    Small helper to standardize success responses across apps.
    Always returns: {"success": true, "message"?: "...", <resource>: ...}
    """
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return Response(body, status=status_code)


def parse_bool(value) -> bool:
    """Query-param style truthiness: "1", "true", "yes"."""
    if isinstance(value, bool):
        return value
    return bool(value) and str(value).lower() in ("1", "true", "yes")
