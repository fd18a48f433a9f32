from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from exam_portal.models.user import User as UserModel
from exam_portal.schemas.response import APIResponse
from exam_portal.schemas.user import ExtendAccessRequest, StudentCreate, User
from exam_portal.services.student import student_service
from exam_portal.utils import deps

router = APIRouter()

@router.get("/", response_model=APIResponse[List[User]])
async def get_students(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.require_admin)
):
    students = student_service.get_students(db)
    return APIResponse(message="Students retrieved successfully", data=[User.model_validate(s) for s in students])

@router.post("/", response_model=APIResponse[User], status_code=status.HTTP_201_CREATED)
async def create_student(
    *,
    db: Session = Depends(deps.get_db),
    student_in: StudentCreate,
    current_user: UserModel = Depends(deps.require_admin)
):
    student = student_service.create_student(db, student_in)
    return APIResponse(message="Student created successfully", data=User.model_validate(student))

@router.post("/{student_id}/extend", response_model=APIResponse[User])
async def extend_student_access(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    request: ExtendAccessRequest,
    current_user: UserModel = Depends(deps.require_admin)
):
    student = student_service.extend_student_access(db, student_id, request.hours)
    return APIResponse(message="Access extended successfully", data=User.model_validate(student))

@router.delete("/{student_id}", response_model=APIResponse[User])
async def delete_student(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    current_user: UserModel = Depends(deps.require_admin)
):
    deleted_student = student_service.delete_student(db, student_id)
    return APIResponse(message="Student deleted successfully", data=User.model_validate(deleted_student))
