from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session
from typing import List

from src.database import get_db
from src.auth.dependencies import get_current_user
from src.ratings.schemas import (
    RatingCreate, Rating, RatingSubmission, RatingWithUser, MyRating, BusRatings, RatingCheck
)
from src.ratings.service import RatingService

router = APIRouter()

@router.post("/", response_model=RatingSubmission)
def add_rating(
    rating_in: RatingCreate,
    response: Response,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rate a completed trip; rating the same trip again updates the score"""
    try:
        rating, created = RatingService.add_rating(db, current_user.id, rating_in)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return RatingSubmission(created=created, rating=Rating.model_validate(rating))

@router.get("/my-ratings", response_model=List[MyRating])
def get_my_ratings(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    return [
        MyRating(
            **Rating.model_validate(rating).dict(),
            bus_name=rating.bus.name,
            bus_number=rating.bus.bus_number,
            journey_date=rating.booking.journey_date
        )
        for rating in RatingService.get_user_ratings(db, current_user.id)
    ]

@router.get("/check/{booking_id}", response_model=RatingCheck)
def check_rating(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Whether the current user has rated a booking"""
    rating = RatingService.get_user_rating(db, current_user.id, booking_id)
    return RatingCheck(has_rated=rating is not None, rating=rating.rating if rating else None)

@router.get("/bus/{bus_id}", response_model=BusRatings)
def get_bus_ratings(bus_id: int, db: Session = Depends(get_db)):
    """Ratings of a bus with average and distribution"""
    summary = RatingService.get_bus_ratings(db, bus_id)
    summary["ratings"] = [
        RatingWithUser(
            **Rating.model_validate(rating).dict(),
            user_name=rating.user.name if rating.user else None
        )
        for rating in summary["ratings"]
    ]
    return BusRatings(**summary)
