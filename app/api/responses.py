from app.schemas.common import ErrorResponse

BAD_REQUEST = {
    400: {
        "model": ErrorResponse,
        "description": "Invalid input or illegal status transition",
    }
}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Project not found"}}
RATE_LIMITED = {429: {"model": ErrorResponse, "description": "Too many requests"}}
