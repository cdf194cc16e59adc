from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Dict, List

from database import get_db
from routers.auth import require_teacher
from schemas.subjects import SubjectAddSchema, SubjectListSchema
from services import store

router = APIRouter(prefix="/api/v1/subjects", tags=["Subjects"])


# 1. Catalog (public, the portal needs column headers)
@router.get("", response_model=Dict[str, List[str]])
def get_subject_catalog(db: Session = Depends(get_db)):
    return store.get_subject_catalog(db)


# 2. Replace the whole list for a class (keeps the given order)
@router.put("/{class_name}", dependencies=[Depends(require_teacher)])
def set_class_subjects(class_name: str, payload: SubjectListSchema, db: Session = Depends(get_db)):
    cleaned = []
    for name in payload.subjects:
        name = name.strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return {"class": class_name, "subjects": store.set_subjects(db, class_name, cleaned)}


# 3. Add one subject at the end
@router.post("/{class_name}/add", dependencies=[Depends(require_teacher)])
def add_class_subject(class_name: str, payload: SubjectAddSchema, db: Session = Depends(get_db)):
    subject = payload.subject.strip()
    if not subject:
        raise HTTPException(status_code=400, detail="Subject name is required")

    current = store.get_subject_catalog(db).get(class_name, [])
    if subject in current:
        return {"class": class_name, "subjects": current}
    return {"class": class_name, "subjects": store.set_subjects(db, class_name, current + [subject])}


# 4. Remove one subject
@router.delete("/{class_name}/{subject}", dependencies=[Depends(require_teacher)])
def remove_class_subject(class_name: str, subject: str, db: Session = Depends(get_db)):
    current = store.get_subject_catalog(db).get(class_name, [])
    if subject not in current:
        raise HTTPException(status_code=404, detail="Subject not found for this class")
    updated = [s for s in current if s != subject]
    return {"class": class_name, "subjects": store.set_subjects(db, class_name, updated)}
