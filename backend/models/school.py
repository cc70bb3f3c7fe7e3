# models/school.py
# 학교별 화면 구성: 스타일 설정/배너/사용자 링크/홈 버튼
from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, JSON
from datetime import datetime

from models.calendar import Base


class SchoolSettings(Base):
    __tablename__ = "school_settings"
    school = Column(String(10), primary_key=True)
    settings = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Banner(Base):
    __tablename__ = "banners"
    school = Column(String(10), primary_key=True)
    message = Column(Text, nullable=False, default="")
    active = Column(Boolean, nullable=False, default=False)
    text_size = Column(String(20), nullable=True)
    text_color = Column(String(20), nullable=True)
    background_color = Column(String(20), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class CustomLink(Base):
    __tablename__ = "custom_links"
    id = Column(Integer, primary_key=True, index=True)
    school = Column(String(10), nullable=False, index=True)
    position = Column(String(5), nullable=False)  # left | right
    title = Column(String(255), nullable=False)
    url = Column(Text, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    text_color = Column(String(20), nullable=True)
    background_color = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class HomeButton(Base):
    __tablename__ = "home_buttons"
    school = Column(String(10), primary_key=True)
    title = Column(String(255), nullable=False)
    image_data = Column(Text, nullable=True)  # base64
    image_type = Column(String(100), nullable=True)  # MIME
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
