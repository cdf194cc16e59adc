from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Tuple
from urllib.parse import quote

from database import get_db
from models.results import Result
from models.students import Student
from routers.auth import require_teacher
from schemas.results import (
    BulkPublishSchema,
    BulkResultEntrySchema,
    ManagedResultSchema,
    PublishSchema,
    ResultEditSchema,
    ResultEntrySchema,
    ResultRecord,
)
from services import exports, store
from services.marksheet import roll_sort_key
from services.result_entry import edit_result, prepare_result

router = APIRouter(prefix="/api/v1/results", tags=["Results"], dependencies=[Depends(require_teacher)])


def _record(row: Result) -> ResultRecord:
    return ResultRecord.model_validate(store.result_to_record(row))


def _managed_results(db: Session, class_name: str, year: str, exam_name: str, search: str = "") -> List[Tuple[Result, Student]]:
    """Results of one scope joined to their students, roll order. Orphans are skipped."""
    students = {s.id: s for s in store.list_students(db)}
    search = (search or "").strip()
    managed = []
    for row in store.list_results(db, class_name, year, exam_name):
        student = students.get(row.student_id)
        if not student:
            continue
        if search and search.lower() not in student.name.lower() and search not in student.roll:
            continue
        managed.append((row, student))
    return sorted(managed, key=lambda pair: roll_sort_key(pair[1].roll))


def _class_subjects(db: Session, class_name: str) -> List[str]:
    subjects = store.get_subject_catalog(db).get(class_name, [])
    if not subjects:
        raise HTTPException(status_code=400, detail="Add subjects for this class first")
    return subjects


# ===========================
#   PART 1: MARKS ENTRY SYSTEM
# ===========================

# 1. Grid data: subjects, roll-sorted students, marks already saved
@router.get("/entry")
def get_entry_data(
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    db: Session = Depends(get_db),
):
    subjects = store.get_subject_catalog(db).get(class_name, [])
    students = sorted(store.list_students(db, class_name, year), key=lambda s: roll_sort_key(s.roll))

    saved_marks = {}
    for s in students:
        existing = store.find_stored_result(db, s.id, class_name, year, exam)
        saved_marks[s.id] = {m["subjectName"]: m["marks"] for m in (existing.marks or [])} if existing else {}

    return {
        "subjects": subjects,
        "students": [{"id": s.id, "name": s.name, "roll": s.roll} for s in students],
        "savedMarks": saved_marks,
    }


# 2. Save one student's marks
@router.post("/save", response_model=ResultRecord)
def save_result(payload: ResultEntrySchema, db: Session = Depends(get_db)):
    if not store.get_student(db, payload.student_id):
        raise HTTPException(status_code=404, detail="Student not found")
    subjects = _class_subjects(db, payload.class_name)

    existing = store.find_stored_result(db, payload.student_id, payload.class_name, payload.year, payload.exam_name)
    record = prepare_result(
        payload.student_id, payload.class_name, payload.year, payload.exam_name,
        payload.marks, subjects, existing,
    )
    store.upsert_results(db, [record])
    return _record(store.get_result(db, record["id"]))


# 3. Save the whole grid
@router.post("/save-all")
def save_all_results(payload: BulkResultEntrySchema, db: Session = Depends(get_db)):
    subjects = _class_subjects(db, payload.class_name)

    records = []
    for entry in payload.entries:
        if not store.get_student(db, entry.student_id):
            raise HTTPException(status_code=404, detail=f"Student {entry.student_id} not found")
        existing = store.find_stored_result(db, entry.student_id, payload.class_name, payload.year, payload.exam_name)
        records.append(prepare_result(
            entry.student_id, payload.class_name, payload.year, payload.exam_name,
            entry.marks, subjects, existing,
        ))

    count = store.upsert_results(db, records)
    return {"message": "Results Saved Successfully!", "updated_count": count}


# ===========================
#   PART 2: MANAGE & PUBLISH
# ===========================

@router.get("/manage", response_model=List[ManagedResultSchema])
def get_managed_results(
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    search: str = "",
    db: Session = Depends(get_db),
):
    return [
        ManagedResultSchema(result=_record(row), roll=student.roll, name=student.name)
        for row, student in _managed_results(db, class_name, year, exam, search)
    ]


@router.get("/export")
def export_results(
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    search: str = "",
    db: Session = Depends(get_db),
):
    managed = _managed_results(db, class_name, year, exam, search)
    frame = exports.results_frame([row for row, _ in managed], {s.id: s for _, s in managed})
    filename = f"Result_Sheet_{class_name}_{exam}_{year}.xlsx"
    return StreamingResponse(
        exports.to_xlsx(frame),
        media_type=exports.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.post("/publish-bulk")
def publish_bulk(payload: BulkPublishSchema, db: Session = Depends(get_db)):
    managed = _managed_results(db, payload.class_name, payload.year, payload.exam_name, payload.search)
    count = store.set_published(db, [row for row, _ in managed], payload.publish)
    status = "published" if payload.publish else "unpublished"
    return {"message": f"{count} result(s) {status}", "count": count, "is_published": payload.publish}


@router.post("/{result_id}/publish", response_model=ResultRecord)
def toggle_publication(result_id: str, payload: PublishSchema, db: Session = Depends(get_db)):
    row = store.get_result(db, result_id)
    if not row:
        raise HTTPException(status_code=404, detail="Result not found")
    store.set_published(db, [row], payload.publish)
    return _record(row)


@router.put("/{result_id}", response_model=ResultRecord)
def update_result(result_id: str, payload: ResultEditSchema, db: Session = Depends(get_db)):
    row = store.get_result(db, result_id)
    if not row:
        raise HTTPException(status_code=404, detail="Result not found")
    try:
        record = edit_result(row, payload.marks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    store.upsert_results(db, [record])
    return _record(store.get_result(db, result_id))


@router.delete("/{result_id}")
def delete_result(result_id: str, db: Session = Depends(get_db)):
    row = store.get_result(db, result_id)
    if not row:
        raise HTTPException(status_code=404, detail="Result not found")
    store.delete_result(db, row)
    return {"status": "deleted"}
