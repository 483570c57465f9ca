"""
Pytest configuration and fixtures.

Provides shared fixtures for testing the grading service.
"""

import pytest
from fastapi.testclient import TestClient

from grading import ExamDefinition

from grading_api.main import app, get_repository_dep
from grading_api.repositories import InMemoryResultRepository
from grading_api.services import GradingService, ReviewService


EXAM_PAYLOAD = {
    "id": "exam-1",
    "title": "중간 점검",
    "category": "독해",
    "groups": [
        {
            "prompt": "인공지능은 인간의 지능을 모방하는 시스템이다.",
            "questions": [
                {
                    "id": "q1",
                    "text": "인공지능에 필요한 것은?",
                    "type": "객관식",
                    "options": ["학습 능력", "크기", "가격", "색상"],
                    "acceptedAnswers": ["1"],
                    "explanation": "학습 능력이 핵심이다.",
                    "wrongAnswerExplanations": {"2": "크기는 관련이 없다."},
                },
                {
                    "id": "q2",
                    "text": "빈칸을 채우시오.",
                    "type": "단답형",
                    "acceptedAnswers": ["표준설", "과실"],
                },
            ],
        },
        {
            "questions": [
                {
                    "id": "q3",
                    "text": "인공지능을 정의하시오.",
                    "type": "서술형",
                    "acceptedAnswers": ["인간의 지능을 모방하는 시스템을 만드는 기술"],
                },
            ],
        },
    ],
}


@pytest.fixture
def repository() -> InMemoryResultRepository:
    """Fresh repository per test"""
    return InMemoryResultRepository()


@pytest.fixture
def client(repository) -> TestClient:
    """FastAPI test client backed by the per-test repository"""
    app.dependency_overrides[get_repository_dep] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def exam_payload() -> dict:
    return EXAM_PAYLOAD


@pytest.fixture
def exam() -> ExamDefinition:
    return ExamDefinition.model_validate(EXAM_PAYLOAD)


@pytest.fixture
def grading_service(repository) -> GradingService:
    return GradingService(repository)


@pytest.fixture
def review_service(repository) -> ReviewService:
    return ReviewService(repository)
