"""
Program pricing and enrollment models.

A program carries the fee configuration for each pricing tier in integer
cents; a student's active or trial enrollments determine what they owe.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_billing.models.base import BaseModel
from school_billing.schemas.common.enums import EnrollmentStatus

if TYPE_CHECKING:
    from school_billing.models.family import Student


class Program(BaseModel):
    __tablename__ = "programs"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    monthly_fee_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    yearly_fee_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    individual_session_fee_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    enrollments: Mapped[List["Enrollment"]] = relationship(back_populates="program")


class Enrollment(BaseModel):
    __tablename__ = "enrollments"

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    program_id: Mapped[str] = mapped_column(
        ForeignKey("programs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    status: Mapped[EnrollmentStatus] = mapped_column(
        Enum(EnrollmentStatus, name="enrollment_status_enum", native_enum=False),
        nullable=False,
        default=EnrollmentStatus.ACTIVE,
        index=True,
    )

    student: Mapped["Student"] = relationship(back_populates="enrollments")
    program: Mapped["Program"] = relationship(back_populates="enrollments")
