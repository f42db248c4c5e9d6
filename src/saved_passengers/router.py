from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from src.database import get_db
from src.auth.dependencies import get_current_user
from src.saved_passengers.schemas import SavedPassenger, SavedPassengerCreate, SavedPassengerUpdate
from src.saved_passengers.service import SavedPassengerService

router = APIRouter()

def _get_passenger_or_404(db: Session, user_id: int, passenger_id: int):
    passenger = SavedPassengerService.get_passenger(db, user_id, passenger_id)
    if not passenger:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Passenger not found"
        )
    return passenger

@router.get("/", response_model=List[SavedPassenger])
def get_saved_passengers(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    return SavedPassengerService.get_passengers(db, current_user.id)

@router.post("/", response_model=SavedPassenger, status_code=status.HTTP_201_CREATED)
def add_saved_passenger(
    passenger: SavedPassengerCreate,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save a passenger for quicker bookings"""
    try:
        return SavedPassengerService.create_passenger(db, current_user.id, passenger)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.put("/{passenger_id}", response_model=SavedPassenger)
def update_saved_passenger(
    passenger_id: int,
    passenger_update: SavedPassengerUpdate,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    passenger = _get_passenger_or_404(db, current_user.id, passenger_id)
    return SavedPassengerService.update_passenger(db, passenger, passenger_update)

@router.delete("/{passenger_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_passenger(
    passenger_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    passenger = _get_passenger_or_404(db, current_user.id, passenger_id)
    SavedPassengerService.delete_passenger(db, passenger)
