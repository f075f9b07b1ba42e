from typing import Any

ROUTER_BASE_PREFIX = "/api/v1"

ResponseMap = dict[int, dict[str, Any]]

PUBLIC_ERROR_RESPONSES: ResponseMap = {
    404: {"description": "Resource not found."},
    500: {"description": "Internal server error."},
}

ACCESS_CONTROL_ERROR_RESPONSES: ResponseMap = {
    401: {"description": "Authentication required."},
    403: {"description": "Forbidden. Insufficient permissions."},
}

VALIDATION_ERROR_RESPONSES: ResponseMap = {
    400: {"description": "Bad request. Check parameters and payload."},
    422: {"description": "Unprocessable entity. Validation failed, or the sharing record has no valid document."},
}
