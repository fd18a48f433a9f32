from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.models.user import User
from exam_portal.schemas.response import APIResponse
from exam_portal.schemas.subject import SubjectWithQuizzes
from exam_portal.services.subject import subject_service
from exam_portal.utils import deps

router = APIRouter()

@router.get("/subjects", response_model=APIResponse[List[SubjectWithQuizzes]])
async def get_subject_catalog(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.require_active_student)
):
    catalog = subject_service.get_catalog(db)
    return APIResponse(message="Subjects retrieved successfully", data=catalog)
