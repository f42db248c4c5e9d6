from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from datetime import datetime

from src.models import Review, Booking
from src.reviews.schemas import ReviewCreate, ReviewStatus
from src.bookings.schemas import BookingStatus
from src.bookings.booking_service import journey_start
from src.logger_config import logger

class ReviewService:
    @staticmethod
    def add_review(
        db: Session,
        user_id: int,
        review_in: ReviewCreate,
        now: Optional[datetime] = None
    ) -> Review:
        """
        Review the bus of one of the user's trips.

        A trip can be reviewed once it has departed and was not cancelled, and
        only once per booking. New reviews wait for admin approval before they
        are shown publicly.
        """
        booking = db.query(Booking).options(joinedload(Booking.route)).filter(
            Booking.id == review_in.booking_id
        ).first()
        if not booking:
            raise LookupError("Booking not found")

        if booking.user_id != user_id:
            raise PermissionError("Not authorized to review this booking")

        if booking.bus_id != review_in.bus_id:
            raise ValueError("Booking is not for this bus")

        if booking.booking_status == BookingStatus.CANCELLED.value:
            raise ValueError("Cannot review a cancelled booking")

        if journey_start(booking) > (now or datetime.now()):
            raise ValueError("Cannot review before journey completion")

        if ReviewService.get_user_review(db, user_id, booking.id):
            raise ValueError("You have already reviewed this booking")

        review = Review(
            user_id=user_id,
            bus_id=booking.bus_id,
            booking_id=booking.id,
            rating=review_in.rating,
            comment=review_in.comment,
            is_approved=False,
            is_reported=False
        )
        db.add(review)
        db.commit()
        db.refresh(review)

        logger.info(f"User {user_id} reviewed bus {booking.bus_id} (review {review.id} awaiting approval)")
        return review

    @staticmethod
    def get_review(db: Session, review_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.id == review_id).first()

    @staticmethod
    def get_user_review(db: Session, user_id: int, booking_id: int) -> Optional[Review]:
        return db.query(Review).filter(
            Review.user_id == user_id,
            Review.booking_id == booking_id
        ).first()

    @staticmethod
    def get_bus_reviews(db: Session, bus_id: int) -> dict:
        """Approved reviews of a bus with average and 5..1 distribution"""
        reviews = db.query(Review).options(joinedload(Review.user)).filter(
            Review.bus_id == bus_id,
            Review.is_approved == True
        ).order_by(Review.created_at.desc(), Review.id.desc()).all()

        distribution = {score: 0 for score in range(5, 0, -1)}
        for review in reviews:
            distribution[review.rating] += 1

        average = sum(r.rating for r in reviews) / len(reviews) if reviews else 0

        return {
            "bus_id": bus_id,
            "count": len(reviews),
            "average_rating": round(average, 1),
            "rating_distribution": distribution,
            "reviews": reviews,
        }

    @staticmethod
    def get_user_reviews(db: Session, user_id: int) -> List[Review]:
        return db.query(Review).options(
            joinedload(Review.bus),
            joinedload(Review.booking)
        ).filter(Review.user_id == user_id).order_by(
            Review.created_at.desc(), Review.id.desc()
        ).all()

    @staticmethod
    def report_review(db: Session, review: Review) -> Review:
        """Flag a review for admin attention"""
        if not review.is_approved:
            raise LookupError("Review not found")

        review.is_reported = True
        db.commit()
        db.refresh(review)
        logger.warning(f"Review {review.id} on bus {review.bus_id} reported")
        return review

    # Moderation
    @staticmethod
    def get_reviews(db: Session, review_status: Optional[ReviewStatus] = None) -> List[Review]:
        query = db.query(Review).options(joinedload(Review.user), joinedload(Review.bus))
        if review_status == ReviewStatus.PENDING:
            query = query.filter(Review.is_approved == False)
        elif review_status == ReviewStatus.APPROVED:
            query = query.filter(Review.is_approved == True)
        elif review_status == ReviewStatus.REPORTED:
            query = query.filter(Review.is_reported == True)
        return query.order_by(Review.created_at.desc(), Review.id.desc()).all()

    @staticmethod
    def approve_review(db: Session, review: Review) -> Review:
        review.is_approved = True
        review.is_reported = False
        db.commit()
        db.refresh(review)
        logger.info(f"Review {review.id} approved")
        return review

    @staticmethod
    def delete_review(db: Session, review: Review) -> None:
        review_id = review.id
        db.delete(review)
        db.commit()
        logger.info(f"Review {review_id} deleted")
