from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from src.models import User
from src.auth.schemas import UserCreate, BusOwnerCreate, UserUpdate, UserRole, OwnerStatus
from src.auth.utils import get_password_hash, verify_password
from src.logger_config import logger
from typing import Optional

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def create_user(db: Session, user: UserCreate, role: UserRole = UserRole.USER) -> User:
        """Create a new user"""
        db_user = User(
            name=user.name,
            email=user.email,
            phone=user.phone,
            password=get_password_hash(user.password),
            role=role.value,
            status=OwnerStatus.APPROVED.value
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            db.rollback()
            raise ValueError("Email already registered")

        logger.info(f"Registered {role.value} {db_user.email}")
        return db_user

    @staticmethod
    def create_bus_owner(db: Session, owner: BusOwnerCreate) -> User:
        """Register a bus owner; the account waits for admin approval"""
        if UserService.get_user_by_email(db, owner.email):
            raise ValueError("Email already registered")

        db_user = User(
            name=owner.name,
            email=owner.email,
            phone=owner.phone,
            password=get_password_hash(owner.password),
            role=UserRole.BUS_OWNER.value,
            status=OwnerStatus.PENDING.value,
            company_name=owner.company_name,
            license_number=owner.license_number
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            db.rollback()
            raise ValueError("Email already registered")

        logger.info(f"Bus owner application received from {db_user.email}")
        return db_user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        user = UserService.get_user_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password):
            return None
        return user

    @staticmethod
    def check_login_allowed(user: User) -> None:
        """Raise PermissionError when the account may not sign in"""
        if user.is_blocked:
            reason = user.block_reason or "Contact support for details"
            raise PermissionError(f"Your account has been blocked. Reason: {reason}")

        if not user.is_active:
            raise PermissionError("Account is deactivated. Contact admin.")

        if user.role == UserRole.BUS_OWNER.value and user.status != OwnerStatus.APPROVED.value:
            if user.status == OwnerStatus.REJECTED.value:
                reason = user.rejection_reason or "Please contact admin for details"
                raise PermissionError(f"Your application was rejected. Reason: {reason}")
            raise PermissionError("Your account is pending admin approval.")

    @staticmethod
    def update_user(db: Session, user_id: int, user_update: UserUpdate) -> Optional[User]:
        """Update user information"""
        db_user = UserService.get_user_by_id(db, user_id)
        if not db_user:
            return None

        update_data = user_update.dict(exclude_unset=True)

        # Hash password if it's being updated
        if "password" in update_data:
            update_data["password"] = get_password_hash(update_data["password"])

        for field, value in update_data.items():
            setattr(db_user, field, value)

        db.commit()
        db.refresh(db_user)
        return db_user
