from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text

from fitcoach.db.base_class import Base, generate_id, utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(64), primary_key=True, default=generate_id)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(30), nullable=False, default="system")
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)


class SystemSetting(Base):
    __tablename__ = "system_settings"

    id = Column(String(64), primary_key=True, default=generate_id)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
