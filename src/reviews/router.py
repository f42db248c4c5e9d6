from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from src.database import get_db
from src.auth.dependencies import get_current_user
from src.reviews.schemas import ReviewCreate, Review, PublicReview, MyReview, BusReviews
from src.reviews.service import ReviewService

router = APIRouter()

@router.post("/", response_model=Review, status_code=status.HTTP_201_CREATED)
def add_review(
    review_in: ReviewCreate,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Review a bus after the journey; shown once an admin approves it"""
    try:
        return ReviewService.add_review(db, current_user.id, review_in)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/my-reviews", response_model=List[MyReview])
def get_my_reviews(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    return [
        MyReview(
            **Review.model_validate(review).dict(),
            bus_name=review.bus.name,
            bus_number=review.bus.bus_number,
            journey_date=review.booking.journey_date
        )
        for review in ReviewService.get_user_reviews(db, current_user.id)
    ]

@router.get("/bus/{bus_id}", response_model=BusReviews)
def get_bus_reviews(bus_id: int, db: Session = Depends(get_db)):
    """Approved reviews of a bus"""
    summary = ReviewService.get_bus_reviews(db, bus_id)
    summary["reviews"] = [
        PublicReview(
            id=review.id,
            rating=review.rating,
            comment=review.comment,
            user_name=review.user.name if review.user else None,
            created_at=review.created_at
        )
        for review in summary["reviews"]
    ]
    return BusReviews(**summary)

@router.post("/{review_id}/report", response_model=Review)
def report_review(
    review_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Flag an inappropriate review for moderation"""
    review = ReviewService.get_review(db, review_id)
    if not review:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")

    try:
        return ReviewService.report_review(db, review)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
