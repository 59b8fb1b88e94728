"""
Turns apigeecli stderr into a short reason string.
"""

import json

PRECONDITION_STATUS = "FAILED_PRECONDITION"
PRECONDITION_MESSAGE = f"{PRECONDITION_STATUS} - Continuing without interrupting the process"
UNAUTHORIZED_MESSAGE = "Unauthorized - the client must authenticate itself"


def classify_export_error(stderr: str) -> str:
    """
    Extract a readable message from apigeecli error output.

    Structured output looks like ``{"error": {"status": ..., "message": ...}}``.
    The precondition status maps to PRECONDITION_MESSAGE, otherwise the
    ``message`` field is used. Unstructured output is checked for the
    unauthorized marker and returned unchanged when nothing matches.
    """
    try:
        parsed = json.loads(stderr)
    except ValueError:
        parsed = None

    if isinstance(parsed, dict) and isinstance(parsed.get("error"), dict):
        error_info = parsed["error"]
        if error_info.get("status") == PRECONDITION_STATUS:
            return PRECONDITION_MESSAGE
        if isinstance(error_info.get("message"), str):
            return error_info["message"]

    if UNAUTHORIZED_MESSAGE in stderr:
        return UNAUTHORIZED_MESSAGE

    return stderr


def is_precondition_failure(message: str) -> bool:
    """True for the benign error the export is allowed to continue past"""
    return PRECONDITION_STATUS in message
