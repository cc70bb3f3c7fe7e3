# schemas/calendar_schema.py
# 요청 본문 모델. 값의 의미 검사는 services 쪽에서 한다(날짜/학년/열거값 등).
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, Optional


class CurriculumIn(BaseModel):
    links: Optional[str] = None
    description: Optional[str] = None


class EventCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    school: Optional[str] = None
    date: Any = None
    title: Optional[str] = Field(None, max_length=255)
    time: Optional[str] = None
    department: Optional[str] = None
    description: Optional[str] = None
    # {"9": {"links": "...", "description": "..."}, ...}
    life_curriculum: Optional[Dict[str, CurriculumIn]] = Field(None, alias="lifeCurriculum")


class EventUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: Any = None
    title: Optional[str] = Field(None, max_length=255)
    time: Optional[str] = None
    department: Optional[str] = None
    description: Optional[str] = None
    life_curriculum: Optional[Dict[str, CurriculumIn]] = Field(None, alias="lifeCurriculum")


class DayLabelIn(BaseModel):
    label: Optional[str] = None


class SpecialDayIn(BaseModel):
    type: Optional[str] = None
    description: Optional[str] = None


class LegacyDaySchedule(BaseModel):
    school: Optional[str] = None
    date: Any = None
    schedule: Optional[str] = None


class LegacyDayType(BaseModel):
    school: Optional[str] = None
    date: Any = None
    type: Optional[str] = None
    description: Optional[str] = None


class MaterialCreate(BaseModel):
    school: Optional[str] = None
    date: Any = None
    grade: Any = None
    title: Optional[str] = Field(None, max_length=255)
    link: Optional[str] = None
    description: Optional[str] = None
    password: Optional[str] = None


class MaterialUpdate(BaseModel):
    date: Any = None
    grade: Any = None
    title: Optional[str] = Field(None, max_length=255)
    link: Optional[str] = None
    description: Optional[str] = None
    password: Optional[str] = None


class BannerIn(BaseModel):
    message: Optional[str] = None
    active: Optional[bool] = None
    text_size: Optional[str] = None
    text_color: Optional[str] = None
    background_color: Optional[str] = None


class LinkCreate(BaseModel):
    position: Optional[str] = None
    title: Optional[str] = Field(None, max_length=255)
    url: Optional[str] = None
    sort_order: Optional[int] = None
    text_color: Optional[str] = None
    background_color: Optional[str] = None


class LinkUpdate(LinkCreate):
    pass


class LoginIn(BaseModel):
    password: Optional[str] = None


class InitIn(BaseModel):
    dbUrl: Optional[str] = None
