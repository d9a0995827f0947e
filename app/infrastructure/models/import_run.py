"""SQLAlchemy model for bulk meal import runs."""

from sqlalchemy import Column, DateTime, Integer, String

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone


class ImportRunModel(Base):
    """Database representation of an uploaded meal spreadsheet."""

    __tablename__ = "import_run"

    id = Column(Integer, primary_key=True, index=True)
    file_name = Column(String(255), nullable=False)
    operator_id = Column(String(100), nullable=False, index=True)
    status = Column(String(40), nullable=False, default="Pending review")
    total_rows = Column(Integer, nullable=False, default=0)
    error_rows = Column(Integer, nullable=False, default=0)
    success_count = Column(Integer, nullable=False, default=0)
    failed_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )
    finished_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ["ImportRunModel"]
