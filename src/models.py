from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, Numeric, Float, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from src.database import Base

# ================================
# Users & Roles
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20))
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")  # user, bus_owner, admin
    is_active = Column(Boolean, default=True)
    is_blocked = Column(Boolean, default=False)
    block_reason = Column(Text)
    blocked_at = Column(DateTime(timezone=True))

    # Bus owner application
    status = Column(String(20), nullable=False, default="approved")  # pending, approved, rejected
    company_name = Column(String(255))
    license_number = Column(String(100))
    rejection_reason = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    buses = relationship("Bus", back_populates="owner")
    bookings = relationship("Booking", back_populates="user", foreign_keys="Booking.user_id")
    saved_passengers = relationship("SavedPassenger", back_populates="user", cascade="all, delete-orphan")

# ================================
# Buses & Seat Layouts
# ================================
class Bus(Base):
    __tablename__ = "buses"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    name = Column(String(255), nullable=False)
    bus_number = Column(String(10), unique=True, nullable=False, index=True)
    bus_type = Column(String(20), nullable=False)  # AC, Non-AC, Volvo, Luxury
    seat_type = Column(String(20), nullable=False)  # Seater, Semi-Sleeper, Sleeper
    total_seats = Column(Integer, nullable=False)
    amenities = Column(JSON, default=list)
    days = Column(JSON, default=list)
    operator = Column(String(255), nullable=False)
    images = Column(JSON, default=list)
    rating = Column(Float, default=0)
    review_count = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("User", back_populates="buses")
    seat_layout = relationship("SeatLayout", back_populates="bus", uselist=False, cascade="all, delete-orphan")
    routes = relationship("Route", back_populates="bus", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="bus")
    ratings = relationship("Rating", back_populates="bus", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="bus", cascade="all, delete-orphan")

class SeatLayout(Base):
    __tablename__ = "seat_layouts"

    id = Column(Integer, primary_key=True, index=True)
    bus_id = Column(Integer, ForeignKey("buses.id"), unique=True, nullable=False)
    layout = Column(String(20), nullable=False)
    total_seats = Column(Integer, nullable=False)
    seats = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    bus = relationship("Bus", back_populates="seat_layout")

# ================================
# Routes
# ================================
class Route(Base):
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, index=True)
    bus_id = Column(Integer, ForeignKey("buses.id"), nullable=False)
    source = Column(String(255), nullable=False, index=True)
    destination = Column(String(255), nullable=False, index=True)
    departure_time = Column(String(5), nullable=False)  # HH:MM
    arrival_time = Column(String(5), nullable=False)
    duration = Column(String(50))
    distance = Column(Float)
    price = Column(Numeric(10, 2), nullable=False)
    boarding_points = Column(JSON, default=list)
    dropping_points = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    bus = relationship("Bus", back_populates="routes")
    bookings = relationship("Booking", back_populates="route")

# ================================
# Bookings & Refunds
# ================================
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String(20), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    bus_id = Column(Integer, ForeignKey("buses.id"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False)
    journey_date = Column(Date, nullable=False, index=True)
    boarding_point = Column(String(255))
    dropping_point = Column(String(255))
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(50))
    transaction_id = Column(String(100))
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, completed, failed, refunded
    booking_status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, cancelled, completed
    cancellation_reason = Column(Text)
    cancelled_at = Column(DateTime(timezone=True))
    verified_at = Column(DateTime(timezone=True))
    verified_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="bookings", foreign_keys=[user_id])
    bus = relationship("Bus", back_populates="bookings")
    route = relationship("Route", back_populates="bookings")
    seats = relationship("BookingSeat", back_populates="booking", cascade="all, delete-orphan")
    refunds = relationship("Refund", back_populates="booking")

class BookingSeat(Base):
    __tablename__ = "booking_seats"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    seat_number = Column(String(10), nullable=False)
    passenger_name = Column(String(255), nullable=False)
    passenger_age = Column(Integer, nullable=False)
    passenger_gender = Column(String(10), nullable=False)
    gender_preference = Column(Boolean, default=False)

    # Relationships
    booking = relationship("Booking", back_populates="seats")

class Refund(Base):
    __tablename__ = "refunds"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    cancellation_charge = Column(Numeric(10, 2), default=0)
    refund_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, processed, rejected
    refund_method = Column(String(30), default="original_payment")
    processed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    booking = relationship("Booking", back_populates="refunds")

# ================================
# Passengers, Ratings & Reviews
# ================================
class SavedPassenger(Base):
    __tablename__ = "saved_passengers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(10), nullable=False)
    is_default = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="saved_passengers")

class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (UniqueConstraint("user_id", "booking_id", name="uq_rating_user_booking"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    bus_id = Column(Integer, ForeignKey("buses.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    bus = relationship("Bus", back_populates="ratings")
    user = relationship("User")
    booking = relationship("Booking")

class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "booking_id", name="uq_review_user_booking"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    bus_id = Column(Integer, ForeignKey("buses.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    is_approved = Column(Boolean, default=False)  # hidden from the public until an admin approves it
    is_reported = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    bus = relationship("Bus", back_populates="reviews")
    user = relationship("User")
    booking = relationship("Booking")
