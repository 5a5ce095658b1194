"""Profile model for horse owners and veterinarians."""

from __future__ import annotations

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models.horse import Horse


class ProfileRole(str, enum.Enum):
    """Who the profile belongs to."""

    OWNER = "owner"
    VET = "vet"


class Profile(TimestampMixin, Base):
    """Login identity plus contact and notification preferences."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[ProfileRole] = mapped_column(
        Enum(ProfileRole), default=ProfileRole.OWNER, nullable=False
    )
    first_name: Mapped[str | None] = mapped_column(String(120))
    last_name: Mapped[str | None] = mapped_column(String(120))
    stall_name: Mapped[str | None] = mapped_column(String(255))
    practice_name: Mapped[str | None] = mapped_column(String(255))
    zip: Mapped[str | None] = mapped_column(String(16))
    notify_vaccination: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    notify_hoof: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    horses: Mapped[list["Horse"]] = relationship(
        "Horse", back_populates="owner", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        """Full name for greetings, falling back to a neutral placeholder."""
        parts = [part for part in (self.first_name, self.last_name) if part]
        return " ".join(parts) or "User"
