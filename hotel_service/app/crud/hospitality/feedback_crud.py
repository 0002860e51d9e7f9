from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.exceptions import AuthorizationError, NotFoundError
from shared.core.schemas import UserToken
from ...enum.hotel_enum import FeedbackCategory, FeedbackStatus
from ...models.hospitality.feedback import Feedback
from ...models.hospitality.reservations import Reservation
from ...schemas.hospitality.feedback_schemas import (
    FeedbackCreate, FeedbackListResponse, FeedbackModerate, FeedbackOut, FeedbackRequest, FeedbackStats
)


def create_feedback(db: Session, current_user: UserToken, feedback: FeedbackCreate) -> FeedbackOut:
    guest_id = UUID(current_user.user_id)
    if feedback.reservation_id:
        reservation = db.query(Reservation).filter(
            Reservation.id == feedback.reservation_id).first()
        if not reservation:
            raise NotFoundError("Reservation not found")
        if reservation.guest_id != guest_id:
            raise AuthorizationError("You can only review your own stays")

    db_feedback = Feedback(guest_id=guest_id, **feedback.model_dump())
    db.add(db_feedback)
    db.commit()
    db.refresh(db_feedback)
    return FeedbackOut.model_validate(db_feedback)


def get_feedback_list(db: Session, current_user: UserToken, params: FeedbackRequest) -> FeedbackListResponse:
    filters = []
    if current_user.is_guest:
        filters.append(Feedback.guest_id == UUID(current_user.user_id))
    if params.status:
        filters.append(Feedback.status == params.status)
    if params.category:
        filters.append(Feedback.category == params.category)
    if params.rating:
        filters.append(Feedback.rating == params.rating)
    if params.search:
        filters.append(Feedback.comment.ilike(f"%{params.search}%"))

    return _list(db, filters, params)


def get_public_feedback(db: Session, params: FeedbackRequest) -> FeedbackListResponse:
    filters = [Feedback.status == FeedbackStatus.approved.value]
    if params.category:
        filters.append(Feedback.category == params.category)
    return _list(db, filters, params)


def _list(db: Session, filters, params: FeedbackRequest) -> FeedbackListResponse:
    base_query = db.query(Feedback).filter(*filters)
    total = base_query.with_entities(func.count(Feedback.id)).scalar()

    query = base_query.order_by(Feedback.created_at.desc()).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)
    return FeedbackListResponse(
        feedback=[FeedbackOut.model_validate(f) for f in query.all()],
        total=total,
    )


def moderate_feedback(db: Session, current_user: UserToken, moderation: FeedbackModerate) -> FeedbackOut:
    feedback = db.query(Feedback).filter(Feedback.id == moderation.id).first()
    if not feedback:
        raise NotFoundError("Feedback not found")

    if moderation.status:
        feedback.status = moderation.status
    if moderation.response is not None:
        feedback.response = moderation.response
        feedback.responded_by = UUID(current_user.user_id)
        feedback.responded_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(feedback)
    return FeedbackOut.model_validate(feedback)


def get_feedback_stats(db: Session) -> FeedbackStats:
    approved = Feedback.status == FeedbackStatus.approved.value

    total, average = db.query(
        func.count(Feedback.id), func.avg(Feedback.rating)
    ).filter(approved).one()

    category_rows = db.query(
        Feedback.category, func.avg(Feedback.rating)
    ).filter(approved).group_by(Feedback.category).all()

    rating_rows = db.query(
        Feedback.rating, func.count(Feedback.id)
    ).filter(approved).group_by(Feedback.rating).all()

    category_averages = {category.value: 0.0 for category in FeedbackCategory}
    category_averages.update({category: round(float(avg), 2) for category, avg in category_rows})

    distribution = {str(rating): 0 for rating in range(1, 6)}
    distribution.update({str(rating): count for rating, count in rating_rows})

    return FeedbackStats(
        totalFeedback=total or 0,
        averageRating=round(float(average or 0), 2),
        categoryAverages=category_averages,
        ratingDistribution=distribution,
    )
