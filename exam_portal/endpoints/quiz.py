from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from exam_portal.models.user import User
from exam_portal.schemas.question import Question
from exam_portal.schemas.quiz import Quiz, QuizCreate, QuizSummary, QuizUpdate
from exam_portal.schemas.response import APIResponse
from exam_portal.services.question import question_service
from exam_portal.services.quiz import quiz_service
from exam_portal.utils import deps

router = APIRouter()

@router.get("/", response_model=APIResponse[List[QuizSummary]])
async def get_quizzes(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user)
):
    quizzes = quiz_service.get_quizzes(db)
    return APIResponse(message="Quizzes retrieved successfully", data=[QuizSummary.model_validate(q) for q in quizzes])

@router.post("/", response_model=APIResponse[Quiz], status_code=status.HTTP_201_CREATED)
async def create_quiz(
    *,
    db: Session = Depends(deps.get_db),
    quiz_in: QuizCreate,
    current_user: User = Depends(deps.require_admin)
):
    quiz = quiz_service.create_quiz(db, quiz_in)
    return APIResponse(message="Quiz created successfully", data=Quiz.model_validate(quiz))

@router.get("/{quiz_id}", response_model=APIResponse[QuizSummary])
async def get_quiz(
    *,
    db: Session = Depends(deps.get_db),
    quiz_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    quiz = quiz_service.get_quiz(db, quiz_id)
    return APIResponse(message="Quiz retrieved successfully", data=QuizSummary.model_validate(quiz))

@router.get("/{quiz_id}/questions", response_model=APIResponse[List[Question]])
async def get_quiz_questions(
    *,
    db: Session = Depends(deps.get_db),
    quiz_id: int,
    current_user: User = Depends(deps.require_admin)
):
    questions = question_service.get_questions_by_quiz(db, quiz_id)
    return APIResponse(message="Questions retrieved successfully", data=[Question.model_validate(q) for q in questions])

@router.patch("/{quiz_id}", response_model=APIResponse[Quiz])
async def update_quiz(
    *,
    db: Session = Depends(deps.get_db),
    quiz_id: int,
    quiz_in: QuizUpdate,
    current_user: User = Depends(deps.require_admin)
):
    quiz = quiz_service.update_quiz(db, quiz_id, quiz_in)
    return APIResponse(message="Quiz updated successfully", data=Quiz.model_validate(quiz))

@router.delete("/{quiz_id}", response_model=APIResponse[Quiz])
async def delete_quiz(
    *,
    db: Session = Depends(deps.get_db),
    quiz_id: int,
    current_user: User = Depends(deps.require_admin)
):
    deleted_quiz = quiz_service.delete_quiz(db, quiz_id)
    return APIResponse(message="Quiz deleted successfully", data=Quiz.model_validate(deleted_quiz))
