# models/admin.py
from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime

from models.calendar import Base


class AdminSession(Base):
    __tablename__ = "admin_sessions"
    token = Column(String(128), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)


class SchemaVersion(Base):
    __tablename__ = "schema_version"
    version = Column(Integer, primary_key=True)
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
