from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from exam_portal.models.user import User
from exam_portal.schemas.question import Question, QuestionCreate, QuestionUpdate, QuestionWithQuizName
from exam_portal.schemas.response import APIResponse
from exam_portal.services.question import question_service
from exam_portal.utils import deps

router = APIRouter()

@router.get("/", response_model=APIResponse[List[QuestionWithQuizName]])
async def get_questions(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin)
):
    questions = question_service.get_questions(db)
    return APIResponse(
        message="Questions retrieved successfully",
        data=[QuestionWithQuizName.model_validate(q) for q in questions]
    )

@router.post("/", response_model=APIResponse[Question], status_code=status.HTTP_201_CREATED)
async def create_question(
    *,
    db: Session = Depends(deps.get_db),
    question_in: QuestionCreate,
    current_user: User = Depends(deps.require_admin)
):
    question = question_service.create_question(db, question_in)
    return APIResponse(message="Question created successfully", data=Question.model_validate(question))

@router.post("/bulk", response_model=APIResponse[List[Question]], status_code=status.HTTP_201_CREATED)
async def create_questions(
    *,
    db: Session = Depends(deps.get_db),
    questions_in: List[QuestionCreate],
    current_user: User = Depends(deps.require_admin)
):
    questions = question_service.create_questions(db, questions_in)
    return APIResponse(
        message=f"{len(questions)} questions created successfully",
        data=[Question.model_validate(q) for q in questions]
    )

@router.get("/{question_id}", response_model=APIResponse[Question])
async def get_question(
    *,
    db: Session = Depends(deps.get_db),
    question_id: int,
    current_user: User = Depends(deps.require_admin)
):
    question = question_service.get_question(db, question_id)
    return APIResponse(message="Question retrieved successfully", data=Question.model_validate(question))

@router.patch("/{question_id}", response_model=APIResponse[Question])
async def update_question(
    *,
    db: Session = Depends(deps.get_db),
    question_id: int,
    question_in: QuestionUpdate,
    current_user: User = Depends(deps.require_admin)
):
    question = question_service.update_question(db, question_id, question_in)
    return APIResponse(message="Question updated successfully", data=Question.model_validate(question))

@router.delete("/{question_id}", response_model=APIResponse[Question])
async def delete_question(
    *,
    db: Session = Depends(deps.get_db),
    question_id: int,
    current_user: User = Depends(deps.require_admin)
):
    deleted_question = question_service.delete_question(db, question_id)
    return APIResponse(message="Question deleted successfully", data=Question.model_validate(deleted_question))
