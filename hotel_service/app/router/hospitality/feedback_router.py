from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_staff, validate_current_token
from shared.core.database import get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.hospitality import feedback_crud as crud
from ...schemas.hospitality.feedback_schemas import (
    FeedbackCreate, FeedbackListResponse, FeedbackModerate, FeedbackOut, FeedbackRequest, FeedbackStats
)

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])


@router.get("/public", response_model=FeedbackListResponse)
def get_public_feedback_endpoint(
    params: FeedbackRequest = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_public_feedback(db, params)


@router.get("/stats", response_model=FeedbackStats)
def get_feedback_stats_endpoint(db: Session = Depends(get_db)):
    return crud.get_feedback_stats(db)


@router.get("/all", response_model=FeedbackListResponse)
def get_feedback_endpoint(
    params: FeedbackRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_feedback_list(db, current_user, params)


@router.post("/", response_model=FeedbackOut)
def create_feedback_route(
    feedback: FeedbackCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_feedback(db, current_user, feedback)


@router.put("/", response_model=FeedbackOut)
def moderate_feedback_route(
    moderation: FeedbackModerate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.moderate_feedback(db, current_user, moderation)
