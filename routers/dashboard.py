from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config import Config
from database import get_db
from schemas.notices import NoticeSchema
from services import store

router = APIRouter(prefix="/api/v1", tags=["Dashboard"])

LATEST_NOTICES = 6


@router.get("/dashboard")
def get_dashboard(db: Session = Depends(get_db)):
    notices = store.list_notices(db)
    return {
        "school_name": Config.SCHOOL_NAME,
        "student_count": store.count_students(db),
        "notice_count": len(notices),
        "notices": [NoticeSchema.model_validate(n) for n in notices[:LATEST_NOTICES]],
    }


# Dropdown values for the search and entry forms
@router.get("/meta")
def get_meta():
    return {
        "classes": Config.CLASSES,
        "years": Config.YEARS,
        "exams": Config.EXAM_NAMES,
    }
