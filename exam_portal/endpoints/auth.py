from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.models.user import User as UserModel
from exam_portal.schemas.response import APIResponse
from exam_portal.schemas.token import LoginRequest, LoginResponse
from exam_portal.schemas.user import User
from exam_portal.services.auth import auth_service
from exam_portal.utils import deps

router = APIRouter()

@router.post("/login", response_model=APIResponse[LoginResponse])
def login_for_access_token(
    request: LoginRequest,
    db: Session = Depends(deps.get_db)
):
    login_response = auth_service.login(db, username=request.username, password=request.password)
    return APIResponse(message="Login successful", data=login_response)

@router.get("/me", response_model=APIResponse[User])
async def read_current_user(
    current_user: UserModel = Depends(deps.get_current_user)
):
    return APIResponse(message="User retrieved successfully", data=User.model_validate(current_user))
