from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from exam_portal.models.user import User
from exam_portal.schemas.quiz import Quiz
from exam_portal.schemas.response import APIResponse
from exam_portal.schemas.subject import Subject, SubjectCreate, SubjectUpdate
from exam_portal.services.quiz import quiz_service
from exam_portal.services.subject import subject_service
from exam_portal.utils import deps

router = APIRouter()

@router.get("/", response_model=APIResponse[List[Subject]])
async def get_subjects(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user)
):
    subjects = subject_service.get_subjects(db)
    return APIResponse(message="Subjects retrieved successfully", data=[Subject.model_validate(s) for s in subjects])

@router.post("/", response_model=APIResponse[Subject], status_code=status.HTTP_201_CREATED)
async def create_subject(
    *,
    db: Session = Depends(deps.get_db),
    subject_in: SubjectCreate,
    current_user: User = Depends(deps.require_admin)
):
    subject = subject_service.create_subject(db, subject_in)
    return APIResponse(message="Subject created successfully", data=Subject.model_validate(subject))

@router.get("/{subject_id}", response_model=APIResponse[Subject])
async def get_subject(
    *,
    db: Session = Depends(deps.get_db),
    subject_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    subject = subject_service.get_subject(db, subject_id)
    return APIResponse(message="Subject retrieved successfully", data=Subject.model_validate(subject))

@router.get("/{subject_id}/quizzes", response_model=APIResponse[List[Quiz]])
async def get_subject_quizzes(
    *,
    db: Session = Depends(deps.get_db),
    subject_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    quizzes = quiz_service.get_quizzes_by_subject(db, subject_id)
    return APIResponse(message="Quizzes retrieved successfully", data=[Quiz.model_validate(q) for q in quizzes])

@router.patch("/{subject_id}", response_model=APIResponse[Subject])
async def update_subject(
    *,
    db: Session = Depends(deps.get_db),
    subject_id: int,
    subject_in: SubjectUpdate,
    current_user: User = Depends(deps.require_admin)
):
    subject = subject_service.update_subject(db, subject_id, subject_in)
    return APIResponse(message="Subject updated successfully", data=Subject.model_validate(subject))

@router.delete("/{subject_id}", response_model=APIResponse[Subject])
async def delete_subject(
    *,
    db: Session = Depends(deps.get_db),
    subject_id: int,
    current_user: User = Depends(deps.require_admin)
):
    deleted_subject = subject_service.delete_subject(db, subject_id)
    return APIResponse(message="Subject deleted successfully", data=Subject.model_validate(deleted_subject))
