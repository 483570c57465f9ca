"""
FastAPI backend for exam grading.

This module wires the layers together:
- Request validation at the boundary (pydantic models)
- Service layer for grading and review
- Repository for atomic persistence
- Structured logging and consistent error responses
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grading import ExamDefinition, Submission

from .core import get_logger, register_error_handlers, settings, setup_logging
from .models import (
    GradedResponse,
    GradePassageRequest,
    MissListResponse,
    PassageResponse,
    ResultKind,
    RetryRequest,
    RetryResponse,
    StoredResult,
    SubmitExamRequest,
    UpdateGradingRequest,
)
from .repositories import ResultRepositoryInterface, get_result_repository
from .services import GradingService, ReviewService

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting grading API",
        extra_data={
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG
        }
    )
    yield
    logger.info("Shutting down grading API")


app = FastAPI(
    title=settings.APP_NAME,
    description="Grades exam submissions, retries and passage study attempts",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


# Dependency injection
def get_repository_dep() -> ResultRepositoryInterface:
    """Get repository instance"""
    return get_result_repository()


def get_grading_service_dep(
    repository: ResultRepositoryInterface = Depends(get_repository_dep)
) -> GradingService:
    """Get grading service instance"""
    return GradingService(repository)


def get_review_service_dep(
    repository: ResultRepositoryInterface = Depends(get_repository_dep)
) -> ReviewService:
    """Get review service instance"""
    return ReviewService(repository)


def graded_response(stored: StoredResult) -> GradedResponse:
    graded = stored.graded()
    return GradedResponse(result_id=stored.id, result=graded.result, misses=list(graded.misses))


# API Routes

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.put("/exams/{exam_id}", response_model=ExamDefinition)
async def put_exam(
    exam_id: str,
    exam: ExamDefinition,
    service: GradingService = Depends(get_grading_service_dep)
):
    """Register or replace an exam definition (the path id wins)"""
    return await service.register_exam(exam.model_copy(update={"id": exam_id}))


@app.get("/exams/{exam_id}", response_model=ExamDefinition)
async def get_exam(
    exam_id: str,
    service: GradingService = Depends(get_grading_service_dep)
):
    return await service.get_exam(exam_id)


@app.post("/exams/{exam_id}/submissions", response_model=GradedResponse)
async def submit_exam(
    exam_id: str,
    request: SubmitExamRequest,
    service: GradingService = Depends(get_grading_service_dep)
):
    """
    Grade a student's exam submission.

    Args:
        exam_id: Exam identifier
        request: Student id, answers and elapsed time

    Returns:
        Score, per-question verdicts and miss records
    """
    logger.info(
        "Submitting exam",
        extra_data={
            "exam_id": exam_id,
            "student_id": request.student_id,
            "num_answers": len(request.answers)
        }
    )

    submission = Submission(answers=request.answers, elapsed_time=request.elapsed_time)
    stored, graded = await service.submit(exam_id, request.student_id, submission)
    return GradedResponse(result_id=stored.id, result=graded.result, misses=list(graded.misses))


@app.get("/results/{result_id}")
async def get_result(
    result_id: str,
    service: GradingService = Depends(get_grading_service_dep)
):
    """Stored result record (exam or passage) with its current miss records"""
    stored = await service.get_result(result_id)
    if stored.kind == ResultKind.EXAM:
        return graded_response(stored).to_dict()

    misses = await service.get_misses(result_id)
    return {
        "resultId": stored.id,
        "kind": stored.kind.value,
        "result": stored.record,
        "misses": [miss.to_dict() for miss in misses],
    }


@app.patch("/results/{result_id}/grading", response_model=GradedResponse)
async def update_grading(
    result_id: str,
    request: UpdateGradingRequest,
    service: GradingService = Depends(get_grading_service_dep)
):
    """Teacher override of one question's correctness"""
    stored, _ = await service.update_grading(
        result_id,
        request.group_index,
        request.question_index,
        request.is_correct
    )
    return graded_response(stored)


@app.get("/students/{student_id}/misses", response_model=MissListResponse)
async def list_misses(
    student_id: str,
    reviewed: Optional[bool] = None,
    category: Optional[str] = None,
    service: ReviewService = Depends(get_review_service_dep)
):
    """Wrong-answer notebook with statistics"""
    misses, stats = await service.list_misses(student_id, reviewed, category)
    return MissListResponse(misses=misses, stats=stats)


@app.post("/misses/{miss_id}/retry", response_model=RetryResponse)
async def retry_miss(
    miss_id: str,
    request: RetryRequest,
    service: ReviewService = Depends(get_review_service_dep)
):
    """Retry a missed question; marks it reviewed when the answer passes"""
    verdict, reviewed = await service.retry(miss_id, request.student_id, request.answer)
    return RetryResponse(verdict=verdict, reviewed=reviewed)


@app.post("/passages/grade", response_model=PassageResponse)
async def grade_passage(
    request: GradePassageRequest,
    service: GradingService = Depends(get_grading_service_dep)
):
    """Grade a passage self-study attempt"""
    stored, result = await service.grade_passage(request.student_id, request.passage, request.attempt)
    return PassageResponse(result_id=stored.id, result=result)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "grading_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
