from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from fitcoach.db.base_class import Base, generate_id, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, index=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    email_confirmed_at = Column(DateTime, nullable=True)
    last_sign_in_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    profile = relationship("Profile", uselist=False, back_populates="user", cascade="all, delete-orphan")
