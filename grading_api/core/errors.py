"""
Application exceptions and error handling.

Defines custom exceptions and error handlers for consistent error responses.
Request-shape problems never reach the grading engine: FastAPI rejects them
with a 422 before any route runs.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging import get_logger

logger = get_logger(__name__)


# Custom Exceptions

class GradingServiceError(Exception):
    """Base exception for grading service errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ExamNotFoundError(GradingServiceError):
    """Raised when an exam definition is not found"""

    def __init__(self, exam_id: str):
        super().__init__(
            message=f"Exam '{exam_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"exam_id": exam_id}
        )


class ResultNotFoundError(GradingServiceError):
    """Raised when a stored result is not found"""

    def __init__(self, result_id: str):
        super().__init__(
            message=f"Result '{result_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"result_id": result_id}
        )


class MissNotFoundError(GradingServiceError):
    """Raised when a miss record is not found for the requesting student"""

    def __init__(self, miss_id: str):
        super().__init__(
            message=f"Miss record '{miss_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"miss_id": miss_id}
        )


class QuestionNotFoundError(GradingServiceError):
    """Raised when a (group, question) reference is outside the exam"""

    def __init__(self, group_index: int, question_index: int):
        super().__init__(
            message=f"Question {group_index}/{question_index} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"group_index": group_index, "question_index": question_index}
        )


class DuplicateSubmissionError(GradingServiceError):
    """Raised when a student submits the same exam twice"""

    def __init__(self, exam_id: str, student_id: str):
        super().__init__(
            message=f"Student '{student_id}' already submitted exam '{exam_id}'",
            status_code=status.HTTP_409_CONFLICT,
            details={"exam_id": exam_id, "student_id": student_id}
        )


# Error Response Models

def create_error_response(
    error: Exception,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    include_details: bool = True
) -> JSONResponse:
    """Create standardized error response"""

    error_data = {
        "error": {
            "type": error.__class__.__name__,
            "message": str(error),
        }
    }

    if isinstance(error, GradingServiceError) and include_details:
        error_data["error"]["details"] = error.details

    log = logger.warning if status_code < 500 else logger.error
    log(
        f"Error occurred: {error}",
        extra_data={
            "error_type": error.__class__.__name__,
            "status_code": status_code,
            **(error.details if isinstance(error, GradingServiceError) else {})
        }
    )

    return JSONResponse(
        status_code=status_code,
        content=error_data
    )


# Exception Handlers

async def grading_error_handler(request: Request, exc: GradingServiceError) -> JSONResponse:
    """Handle GradingServiceError exceptions"""
    return create_error_response(exc, exc.status_code)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "type": "HTTPException",
                "message": exc.detail,
            }
        }
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors"""
    logger.warning(
        "Validation error",
        extra_data={"path": request.url.path, "error_count": len(exc.errors())}
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "type": "ValidationError",
                "message": "Request validation failed",
                "details": jsonable_errors(exc),
            }
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list[Dict[str, Any]]:
    """Strip non-serializable context (e.g. the raised exception) from errors"""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors"""
    logger.exception(
        "Unexpected error occurred",
        extra_data={"path": request.url.path}
    )

    from .config import settings
    include_details = settings.DEBUG

    message = str(exc) if include_details else "An internal error occurred"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "type": "InternalServerError",
                "message": message,
            }
        }
    )


def register_error_handlers(app):
    """Register error handlers with FastAPI app"""
    app.add_exception_handler(GradingServiceError, grading_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
