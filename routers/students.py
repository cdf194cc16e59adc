from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from urllib.parse import quote
import time

from database import get_db
from models.students import Student
from routers.auth import require_teacher
from schemas.students import StudentCreateSchema, StudentRecord, StudentUpdateSchema
from services import exports, store
from services.marksheet import roll_sort_key

router = APIRouter(prefix="/api/v1/students", tags=["Students"], dependencies=[Depends(require_teacher)])


def _matches_search(student: Student, search: str) -> bool:
    if not search:
        return True
    return search.lower() in (student.name or "").lower() or search in (student.roll or "")


def _filtered_students(db: Session, class_name: Optional[str], year: Optional[str], search: str) -> List[Student]:
    students = [s for s in store.list_students(db, class_name, year) if _matches_search(s, search)]
    return sorted(students, key=lambda s: roll_sort_key(s.roll))


def _new_student_id(db: Session) -> str:
    # millisecond timestamp, bumped on collision
    candidate = int(time.time() * 1000)
    while store.get_student(db, str(candidate)):
        candidate += 1
    return str(candidate)


# ===============================
#   1. SPECIFIC ROUTES (KEEP ON TOP)
# ===============================

@router.get("/export")
def export_students(
    class_name: Optional[str] = Query(None, alias="class"),
    year: Optional[str] = None,
    search: str = "",
    db: Session = Depends(get_db),
):
    frame = exports.students_frame(_filtered_students(db, class_name, year, search.strip()))
    filename = f"Student_List_{class_name or 'all'}_{year or 'all'}.xlsx"
    return StreamingResponse(
        exports.to_xlsx(frame),
        media_type=exports.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


# ===============================
#   2. LIST / ENROLL / EDIT / DELETE
# ===============================

@router.get("", response_model=List[StudentRecord])
def get_students(
    class_name: Optional[str] = Query(None, alias="class"),
    year: Optional[str] = None,
    search: str = "",
    db: Session = Depends(get_db),
):
    students = _filtered_students(db, class_name, year, search.strip())
    return [StudentRecord.model_validate(store.student_to_record(s)) for s in students]


@router.post("", response_model=StudentRecord, status_code=201)
def enroll_student(payload: StudentCreateSchema, db: Session = Depends(get_db)):
    student_id = payload.id or _new_student_id(db)
    if store.get_student(db, student_id):
        raise HTTPException(status_code=400, detail="Student id already exists")

    student = Student(
        id=student_id,
        roll=payload.roll,
        name=payload.name,
        father_name=payload.father_name,
        mother_name=payload.mother_name,
        village=payload.village,
        mobile=payload.mobile,
        student_class=payload.student_class,
        year=payload.year,
    )
    student = store.add_student(db, student)
    return StudentRecord.model_validate(store.student_to_record(student))


@router.put("/{student_id}", response_model=StudentRecord)
def edit_student(student_id: str, payload: StudentUpdateSchema, db: Session = Depends(get_db)):
    student = store.get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    student = store.update_student(db, student, changes)
    return StudentRecord.model_validate(store.student_to_record(student))


@router.delete("/{student_id}")
def remove_student(student_id: str, db: Session = Depends(get_db)):
    student = store.get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    store.delete_student(db, student)
    return {"status": "deleted"}
