from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from typing import List, Optional, Tuple

from src.models import Rating, Booking, Bus
from src.ratings.schemas import RatingCreate
from src.bookings.schemas import BookingStatus
from src.logger_config import logger

class RatingService:
    @staticmethod
    def add_rating(db: Session, user_id: int, rating_in: RatingCreate) -> Tuple[Rating, bool]:
        """
        Rate the bus of one of the user's completed trips.

        Rating the same booking again replaces the earlier score. Returns the
        rating and whether it was newly created.
        """
        booking = db.query(Booking).filter(Booking.id == rating_in.booking_id).first()
        if not booking:
            raise LookupError("Booking not found")

        if booking.user_id != user_id:
            raise PermissionError("Not authorized to rate this booking")

        if booking.bus_id != rating_in.bus_id:
            raise ValueError("Booking is not for this bus")

        if booking.booking_status != BookingStatus.COMPLETED.value:
            raise ValueError("You can only rate completed trips")

        rating = RatingService.get_user_rating(db, user_id, booking.id)
        created = rating is None
        if created:
            rating = Rating(user_id=user_id, bus_id=booking.bus_id, booking_id=booking.id)
            db.add(rating)
        rating.rating = rating_in.rating

        db.flush()
        RatingService.update_bus_rating(db, booking.bus_id)
        db.commit()
        db.refresh(rating)

        logger.info(f"User {user_id} rated bus {booking.bus_id}: {rating.rating}")
        return rating, created

    @staticmethod
    def update_bus_rating(db: Session, bus_id: int) -> None:
        """Recompute a bus's average rating and review count"""
        average, count = db.query(func.avg(Rating.rating), func.count(Rating.id)).filter(
            Rating.bus_id == bus_id
        ).one()

        bus = db.query(Bus).filter(Bus.id == bus_id).first()
        bus.rating = round(float(average), 1) if count else 0
        bus.review_count = count

    @staticmethod
    def get_user_rating(db: Session, user_id: int, booking_id: int) -> Optional[Rating]:
        return db.query(Rating).filter(
            Rating.user_id == user_id,
            Rating.booking_id == booking_id
        ).first()

    @staticmethod
    def get_bus_ratings(db: Session, bus_id: int) -> dict:
        ratings = db.query(Rating).options(joinedload(Rating.user)).filter(
            Rating.bus_id == bus_id
        ).order_by(Rating.created_at.desc(), Rating.id.desc()).all()

        distribution = {score: 0 for score in range(5, 0, -1)}
        for rating in ratings:
            distribution[rating.rating] += 1

        average = sum(r.rating for r in ratings) / len(ratings) if ratings else 0

        return {
            "bus_id": bus_id,
            "count": len(ratings),
            "average_rating": round(average, 1),
            "rating_distribution": distribution,
            "ratings": ratings,
        }

    @staticmethod
    def get_user_ratings(db: Session, user_id: int) -> List[Rating]:
        return db.query(Rating).options(
            joinedload(Rating.bus),
            joinedload(Rating.booking)
        ).filter(Rating.user_id == user_id).order_by(
            Rating.created_at.desc(), Rating.id.desc()
        ).all()
