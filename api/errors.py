"""
Mapping of use case failures to HTTP responses.

Part of RIT-9: Structured error kinds

Routers hand a failed use case result to error_response(); the client gets
the stable error kind and a message, never a stack trace or storage detail.
"""

from fastapi.responses import JSONResponse

from application.use_cases.base import INTERNAL_ERROR, UseCaseResult

STATUS_BY_KIND = {
    "not_found": 404,
    "forbidden": 403,
    "conflict": 409,
    "duplicate_completion": 409,
    "invalid_step_definition": 422,
    "invalid_frequency_rule": 422,
    "missing_required_step": 422,
    "type_mismatch": 422,
    "malformed_response": 422,
    "invalid_quantity": 422,
    "invalid_request": 422,
    "storage_unavailable": 503,
    INTERNAL_ERROR: 500,
}


def status_for(error_kind: str) -> int:
    return STATUS_BY_KIND.get(error_kind, 500)


def error_body(result: UseCaseResult) -> dict:
    kind = result.error_kind or INTERNAL_ERROR
    details = {} if kind in ("storage_unavailable", INTERNAL_ERROR) else result.error_details
    return {
        "success": False,
        "error_kind": kind,
        "message": result.error,
        "details": details,
    }


def error_response(result: UseCaseResult) -> JSONResponse:
    """Build the JSON error response for a failed use case result."""
    body = error_body(result)
    return JSONResponse(status_code=status_for(body["error_kind"]), content=body)
