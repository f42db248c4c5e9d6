from sqlalchemy.orm import Session
from typing import List, Optional

from src.models import SavedPassenger
from src.saved_passengers.schemas import SavedPassengerCreate, SavedPassengerUpdate

MAX_SAVED_PASSENGERS = 10

class SavedPassengerService:
    @staticmethod
    def get_passengers(db: Session, user_id: int) -> List[SavedPassenger]:
        """Saved passengers of a user, default first"""
        return db.query(SavedPassenger).filter(
            SavedPassenger.user_id == user_id
        ).order_by(SavedPassenger.is_default.desc(), SavedPassenger.name).all()

    @staticmethod
    def get_passenger(db: Session, user_id: int, passenger_id: int) -> Optional[SavedPassenger]:
        return db.query(SavedPassenger).filter(
            SavedPassenger.id == passenger_id,
            SavedPassenger.user_id == user_id
        ).first()

    @staticmethod
    def create_passenger(db: Session, user_id: int, passenger_in: SavedPassengerCreate) -> SavedPassenger:
        count = db.query(SavedPassenger).filter(SavedPassenger.user_id == user_id).count()
        if count >= MAX_SAVED_PASSENGERS:
            raise ValueError(f"Maximum {MAX_SAVED_PASSENGERS} saved passengers allowed")

        passenger = SavedPassenger(**passenger_in.dict(), user_id=user_id)
        if passenger.is_default:
            SavedPassengerService._clear_default(db, user_id)

        db.add(passenger)
        db.commit()
        db.refresh(passenger)
        return passenger

    @staticmethod
    def update_passenger(
        db: Session,
        passenger: SavedPassenger,
        passenger_update: SavedPassengerUpdate
    ) -> SavedPassenger:
        update_data = passenger_update.dict(exclude_unset=True)

        if update_data.get("is_default"):
            SavedPassengerService._clear_default(db, passenger.user_id, exclude_id=passenger.id)

        for field, value in update_data.items():
            setattr(passenger, field, value)

        db.commit()
        db.refresh(passenger)
        return passenger

    @staticmethod
    def delete_passenger(db: Session, passenger: SavedPassenger) -> None:
        db.delete(passenger)
        db.commit()

    @staticmethod
    def _clear_default(db: Session, user_id: int, exclude_id: Optional[int] = None) -> None:
        # Only one default passenger per user
        query = db.query(SavedPassenger).filter(
            SavedPassenger.user_id == user_id,
            SavedPassenger.is_default == True
        )
        if exclude_id is not None:
            query = query.filter(SavedPassenger.id != exclude_id)
        query.update({SavedPassenger.is_default: False}, synchronize_session=False)
