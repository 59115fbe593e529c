from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String

from fitcoach.db.base_class import Base, generate_id, utcnow


class DietPlan(Base):
    __tablename__ = "diet_plans"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    total_calories = Column(Integer, nullable=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    content = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
