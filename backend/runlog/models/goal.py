from sqlalchemy import false, Boolean, CheckConstraint, Column, Date, DateTime, Integer, Numeric, String
from sqlalchemy.sql import func
from runlog.db import Base


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (
        CheckConstraint(
            "target_distance IS NOT NULL OR target_pace IS NOT NULL",
            name="ck_goals_has_target",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    name = Column(String, nullable=False)
    target_date = Column(Date, nullable=False)

    target_distance = Column(Numeric(7, 2), nullable=True)  # miles
    target_pace = Column(Numeric(6, 2), nullable=True)  # min/mile

    # Set by the user or by auto-completion; only ever flips false -> true automatically
    completed = Column(Boolean, nullable=False, default=False, server_default=false())
    description = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
