# routes/materials.py
# 보충 자료 CRUD(관리자 게이트 없음)
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from routes.calendar_render import _pack_material
from routes.school_scope import school_from_query
from schemas.calendar_schema import MaterialCreate, MaterialUpdate
from services import material_service

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.get("")
def list_materials(
    school: str = Depends(school_from_query),
    grade: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return [_pack_material(m) for m in material_service.list_materials(db, school, grade)]


@router.post("")
def create_material(body: MaterialCreate, db: Session = Depends(get_db)):
    return _pack_material(material_service.create(db, body))


@router.put("/{material_id}")
def update_material(material_id: int, body: MaterialUpdate, db: Session = Depends(get_db)):
    return _pack_material(material_service.update(db, material_id, body))


@router.delete("/{material_id}")
def delete_material(material_id: int, db: Session = Depends(get_db)):
    material_service.delete(db, material_id)
    return {"success": True}
