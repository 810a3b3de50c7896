"""SubjectKey ORM model. One symmetric key per subject; deleting it shreds the data."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from subject_vault.infrastructure.persistence.database import Base
from subject_vault.infrastructure.persistence.models.mixins import CreatedAtMixin


class SubjectKey(CreatedAtMixin, Base):
    """Encryption key for a subject. Table: subject_key.

    subject_id is the primary key, so the store rejects a second key for the
    same subject. There is no update path: keys are created or deleted.
    """

    __tablename__ = "subject_key"

    subject_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("subject.id", ondelete="CASCADE"),
        primary_key=True,
    )
    key: Mapped[str] = mapped_column(String, nullable=False)
