from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str
    location: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class ValidationErrorResponse(BaseModel):
    success: bool = False
    errors: list[FieldError]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
