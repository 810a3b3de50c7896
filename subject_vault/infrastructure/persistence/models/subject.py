"""Subject ORM model. Encrypted personal data plus consent and objection flags."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from subject_vault.domain.enums import SubjectStatus
from subject_vault.infrastructure.persistence.database import Base
from subject_vault.infrastructure.persistence.models.mixins import TimestampMixin

_STATUS_VALUES = ", ".join(f"'{v}'" for v in SubjectStatus.values())


class Subject(TimestampMixin, Base):
    """Subject entity. Table: subject. Primary key is the caller-supplied subject id.

    The row outlives erasure: only the key row is deleted, so the
    ciphertext stays in place but can no longer be decrypted.
    """

    __tablename__ = "subject"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    encrypted_personal_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    direct_marketing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email_communication: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    research: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    objection: Mapped[Any | None] = mapped_column(
        JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql"),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubjectStatus.ACTIVE.value, index=True
    )
    erased_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="subject_status_check"),
    )
