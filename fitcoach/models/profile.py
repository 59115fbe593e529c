import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from fitcoach.db.base_class import Base, utcnow


class UserRole(str, enum.Enum):
    admin = "admin"
    trainer = "trainer"
    student = "student"


class TrainerPlan(str, enum.Enum):
    free = "free"
    pro = "pro"
    elite = "elite"


class StudentStatus(str, enum.Enum):
    active = "active"
    paused = "paused"
    cancelled = "cancelled"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    phone = Column(String(30), nullable=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")


class TrainerProfile(Base):
    __tablename__ = "trainer_profiles"

    id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    plan = Column(Enum(TrainerPlan, name="trainer_plan"), nullable=False, default=TrainerPlan.free)
    max_students = Column(Integer, nullable=False, default=3)
    ai_credits = Column(Integer, nullable=False, default=0)
    active_until = Column(DateTime, nullable=True)
    avatar_url = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    whatsapp_number = Column(String(30), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    profile = relationship("Profile", foreign_keys=[id])


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    gender = Column(String(20), nullable=True)
    menstrual_cycle_tracking = Column(Boolean, nullable=False, default=False)
    start_date = Column(DateTime, default=utcnow)
    status = Column(Enum(StudentStatus, name="student_status"), nullable=False, default=StudentStatus.active)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    profile = relationship("Profile", foreign_keys=[id])
