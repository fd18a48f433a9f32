from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.models.user import User
from exam_portal.schemas.response import APIResponse
from exam_portal.schemas.stats import Stats
from exam_portal.services.stats import get_stats
from exam_portal.utils import deps

router = APIRouter()

@router.get("/stats", response_model=APIResponse[Stats])
async def read_stats(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin)
):
    return APIResponse(message="Stats retrieved successfully", data=get_stats(db))
