"""SubjectProcessor ORM model. Links a subject to a processor entitled to list it."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from subject_vault.infrastructure.persistence.database import Base
from subject_vault.infrastructure.persistence.models.mixins import CreatedAtMixin


class SubjectProcessor(CreatedAtMixin, Base):
    """Subject-to-processor association. Table: subject_processor.

    Primary key (subject_id, processor_id); indexed on processor_id for listings.
    """

    __tablename__ = "subject_processor"

    subject_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("subject.id", ondelete="CASCADE"),
        primary_key=True,
    )
    processor_id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
