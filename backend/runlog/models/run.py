from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, CheckConstraint
from sqlalchemy.sql import func
from runlog.db import Base

class Run(Base):
    __tablename__ = "runs"
    __table_args__ = (
        CheckConstraint("feeling_rating BETWEEN 1 AND 5", name="ck_runs_feeling_rating"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Owner; every query is scoped to it
    user_id = Column(String, nullable=False, index=True)

    date = Column(Date, nullable=False)

    distance = Column(Numeric(7, 2), nullable=False)  # miles, e.g. 3.10
    duration = Column(Numeric(8, 2), nullable=False)  # minutes, e.g. 28.50

    # Stored for query convenience: duration / distance at write time
    pace = Column(Numeric(7, 2), nullable=False)

    route = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    feeling_rating = Column(Integer, nullable=False, server_default="3")

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
