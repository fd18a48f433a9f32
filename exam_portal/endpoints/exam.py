from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from exam_portal.models.user import User
from exam_portal.schemas.exam_session import (
    ExamStarted,
    ExamSummary,
    ExamView,
    StartExamRequest,
    SubmitExamRequest,
)
from exam_portal.schemas.response import APIResponse
from exam_portal.services.exam_session import exam_session_service
from exam_portal.utils import deps

router = APIRouter()

@router.post("/start", response_model=APIResponse[ExamStarted], status_code=status.HTTP_201_CREATED)
async def start_exam(
    *,
    db: Session = Depends(deps.get_db),
    request: StartExamRequest,
    current_user: User = Depends(deps.require_active_student)
):
    exam_id = exam_session_service.start_exam(
        db,
        user_id=current_user.id,
        quiz_id=request.quiz_id,
        question_count=request.question_count
    )
    return APIResponse(message="Exam started", data=ExamStarted(exam_id=exam_id))

@router.get("/{exam_id}", response_model=APIResponse[ExamView])
async def get_exam_view(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: str,
    current_user: User = Depends(deps.require_student)
):
    view = exam_session_service.get_exam_view(db, exam_id=exam_id, user_id=current_user.id)
    return APIResponse(message="Exam retrieved successfully", data=view)

# Plain def: the submission lock blocks, so this runs in the threadpool.
@router.post("/{exam_id}/submit", response_model=APIResponse[ExamSummary])
def submit_exam(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: str,
    request: SubmitExamRequest,
    current_user: User = Depends(deps.require_student)
):
    summary = exam_session_service.submit_exam(
        db, exam_id=exam_id, answers=request.answers, user_id=current_user.id
    )
    return APIResponse(message="Exam submitted successfully", data=summary)

@router.get("/{exam_id}/results", response_model=APIResponse[ExamSummary])
async def get_exam_results(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: str,
    current_user: User = Depends(deps.require_student)
):
    summary = exam_session_service.get_exam_results(db, exam_id=exam_id, user_id=current_user.id)
    return APIResponse(message="Results retrieved successfully", data=summary)
