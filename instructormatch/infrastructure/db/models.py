from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


def _enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    return Enum(enum_cls, name=name, values_callable=lambda e: [x.value for x in e])


Money = Numeric(10, 2)


class UserType(str, enum.Enum):
    COMPANY = "company"
    INSTRUCTOR = "instructor"


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestStatus(str, enum.Enum):
    """Training request lifecycle.

    Moves forward only: open -> in_progress -> completed, with cancelled
    reachable from either non-terminal state.
    """

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ContractStatus(str, enum.Enum):
    DRAFT = "draft"
    SIGNED = "signed"
    COMPLETED = "completed"
    DISPUTED = "disputed"


class PaymentStatus(str, enum.Enum):
    HELD_IN_ESCROW = "held_in_escrow"
    RELEASED = "released"
    REFUNDED = "refunded"
    DISPUTED = "disputed"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class UserModel(TimestampMixin, Base):
    """Identity-provider subject mirrored locally on first authenticated request."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(128))
    last_name: Mapped[str | None] = mapped_column(String(128))
    profile_image_url: Mapped[str | None] = mapped_column(String(512))
    user_type: Mapped[UserType | None] = mapped_column(_enum(UserType, "user_type"), nullable=True)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, user_type={self.user_type})>"


class Company(TimestampMixin, Base):
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(128))
    company_size: Mapped[str | None] = mapped_column(String(64))
    description: Mapped[str | None] = mapped_column(Text)
    website: Mapped[str | None] = mapped_column(String(512))
    location: Mapped[str | None] = mapped_column(String(255))

    training_requests: Mapped[list[TrainingRequest]] = relationship(
        back_populates="company", cascade="all,delete-orphan"
    )


class Instructor(TimestampMixin, Base):
    __tablename__ = "instructors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    professional_title: Mapped[str] = mapped_column(String(255), nullable=False)
    years_experience: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255))
    bio: Mapped[str | None] = mapped_column(Text)
    specializations: Mapped[list[str] | None] = mapped_column(JSON)
    min_hourly_rate: Mapped[Decimal] = mapped_column(Money, nullable=False)
    desired_hourly_rate: Mapped[Decimal] = mapped_column(Money, nullable=False)
    # Set out-of-band by moderation, never through the profile endpoints.
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    verification_status: Mapped[VerificationStatus] = mapped_column(
        _enum(VerificationStatus, "verification_status"),
        default=VerificationStatus.PENDING,
        nullable=False,
    )
    verification_documents: Mapped[list[str] | None] = mapped_column(JSON)
    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), default=Decimal("0"), nullable=False)
    completed_sessions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_earnings: Mapped[Decimal] = mapped_column(Money, default=Decimal("0"), nullable=False)

    applications: Mapped[list[Application]] = relationship(back_populates="instructor")


class TrainingRequest(TimestampMixin, Base):
    __tablename__ = "training_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    company_id: Mapped[str] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    training_type: Mapped[str] = mapped_column(String(128), nullable=False)
    duration: Mapped[str] = mapped_column(String(128), nullable=False)
    min_budget: Mapped[Decimal] = mapped_column(Money, nullable=False)
    max_budget: Mapped[Decimal] = mapped_column(Money, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255))
    is_remote: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    preferred_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[RequestStatus] = mapped_column(
        _enum(RequestStatus, "request_status"),
        default=RequestStatus.OPEN,
        nullable=False,
        index=True,
    )
    selected_instructor_id: Mapped[str | None] = mapped_column(
        ForeignKey("instructors.id", ondelete="SET NULL"), nullable=True
    )

    company: Mapped[Company] = relationship(back_populates="training_requests")
    applications: Mapped[list[Application]] = relationship(
        back_populates="request", cascade="all,delete-orphan"
    )


class Application(TimestampMixin, Base):
    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    request_id: Mapped[str] = mapped_column(
        ForeignKey("training_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    instructor_id: Mapped[str] = mapped_column(
        ForeignKey("instructors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    proposed_rate: Mapped[Decimal] = mapped_column(Money, nullable=False)
    cover_letter: Mapped[str | None] = mapped_column(Text)
    status: Mapped[ApplicationStatus] = mapped_column(
        _enum(ApplicationStatus, "application_status"),
        default=ApplicationStatus.PENDING,
        nullable=False,
    )

    request: Mapped[TrainingRequest] = relationship(back_populates="applications")
    instructor: Mapped[Instructor] = relationship(back_populates="applications")


class Contract(TimestampMixin, Base):
    __tablename__ = "contracts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    request_id: Mapped[str] = mapped_column(
        ForeignKey("training_requests.id"), nullable=False, index=True
    )
    company_id: Mapped[str] = mapped_column(ForeignKey("companies.id"), nullable=False, index=True)
    instructor_id: Mapped[str] = mapped_column(
        ForeignKey("instructors.id"), nullable=False, index=True
    )
    agreed_rate: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    terms: Mapped[str | None] = mapped_column(Text)
    status: Mapped[ContractStatus] = mapped_column(
        _enum(ContractStatus, "contract_status"),
        default=ContractStatus.DRAFT,
        nullable=False,
    )
    signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    payments: Mapped[list[Payment]] = relationship(
        back_populates="contract", cascade="all,delete-orphan"
    )


class Payment(TimestampMixin, Base):
    """Simulated escrow record; no processor is ever charged."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    contract_id: Mapped[str] = mapped_column(
        ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    service_fee: Mapped[Decimal] = mapped_column(Money, nullable=False)
    instructor_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        _enum(PaymentStatus, "payment_status"),
        default=PaymentStatus.HELD_IN_ESCROW,
        nullable=False,
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    released_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    contract: Mapped[Contract] = relationship(back_populates="payments")


class Review(TimestampMixin, Base):
    __tablename__ = "reviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    contract_id: Mapped[str] = mapped_column(ForeignKey("contracts.id"), nullable=False, index=True)
    reviewer_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    reviewee_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-5
    comment: Mapped[str | None] = mapped_column(Text)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Notification(Base):
    """Append-only per-user message; ``type`` is a delivery label only."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # email, sms, push
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    idempotency_key: Mapped[str | None] = mapped_column(String(128), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )


__all__ = [
    "UserType",
    "VerificationStatus",
    "RequestStatus",
    "ApplicationStatus",
    "ContractStatus",
    "PaymentStatus",
    "UserModel",
    "Company",
    "Instructor",
    "TrainingRequest",
    "Application",
    "Contract",
    "Payment",
    "Review",
    "Notification",
    "utcnow",
]
