# services/material_service.py
# 학년별 보충 자료(행사와 독립). password는 화면에서 쓰는 단순 잠금값이다.
from typing import List, Optional

from sqlalchemy.orm import Session

from errors import NotFoundError
from models.calendar import Material
from schemas.calendar_schema import MaterialCreate, MaterialUpdate
from services.calendar_rules import optional_text, parse_grade, require_text, validate_school
from services.calendar_time import parse_date, utcnow
from services.storage import storage_op


def list_materials(db: Session, school: str, grade=None) -> List[Material]:
    school = validate_school(school)
    query = db.query(Material).filter(Material.school == school)
    if grade is not None and str(grade).strip():
        query = query.filter(Material.grade == parse_grade(grade))
    return query.order_by(Material.date.asc(), Material.id.asc()).all()


def get(db: Session, material_id: int) -> Optional[Material]:
    return db.get(Material, material_id)


def create(db: Session, payload: MaterialCreate) -> Material:
    school = validate_school(payload.school)
    m = Material(
        school=school,
        date=parse_date(payload.date),
        grade=parse_grade(payload.grade),
        title=require_text(payload.title, "title", max_len=255),
        link=optional_text(payload.link),
        description=optional_text(payload.description),
        password=optional_text(payload.password),
    )
    with storage_op(db, "create_material", school=school):
        db.add(m)
        db.commit()
    db.refresh(m)
    return m


def update(db: Session, material_id: int, patch: MaterialUpdate) -> Material:
    data = patch.model_dump(exclude_unset=True)
    if "date" in data:
        data["date"] = parse_date(data["date"])
    if "grade" in data:
        data["grade"] = parse_grade(data["grade"])
    if "title" in data:
        data["title"] = require_text(data["title"], "title", max_len=255)
    for k in ("link", "description", "password"):
        if k in data:
            data[k] = optional_text(data[k])

    with storage_op(db, "update_material", ident=material_id):
        m = get(db, material_id)
        if not m:
            raise NotFoundError("Material", material_id)
        for k, v in data.items():
            setattr(m, k, v)
        m.updated_at = utcnow()
        db.commit()
    db.refresh(m)
    return m


def delete(db: Session, material_id: int) -> None:
    with storage_op(db, "delete_material", ident=material_id):
        m = get(db, material_id)
        if not m:
            raise NotFoundError("Material", material_id)
        db.delete(m)
        db.commit()
