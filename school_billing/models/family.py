"""
Family and student models.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_billing.models.base import BaseModel

if TYPE_CHECKING:
    from school_billing.models.program import Enrollment


class Family(BaseModel):
    """A billing household; payments and discounts are scoped to it."""

    __tablename__ = "families"

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    students: Mapped[List["Student"]] = relationship(
        back_populates="family",
        order_by="Student.created_at",
    )


class Student(BaseModel):
    __tablename__ = "students"

    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    family: Mapped["Family"] = relationship(back_populates="students")
    enrollments: Mapped[List["Enrollment"]] = relationship(back_populates="student")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
