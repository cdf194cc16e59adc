"""
Record store adapter: plain get / upsert / delete over the SQL tables.

The only rule enforced here is the write-path uniqueness of
(studentId, class, year, examName), see `find_stored_result`.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.notices import Notice
from models.results import Result
from models.settings import AppSetting
from models.students import Student
from models.subjects import SubjectCatalog
from services.snapshot import Snapshot, build_snapshot

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A write could not be committed; the session was rolled back."""


def _commit(db: Session):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Store commit failed")
        raise StoreError(str(e)) from e


# ===========================
#     ROW -> RECORD DICTS
# ===========================

def student_to_record(row: Student) -> dict:
    return {
        "id": row.id,
        "roll": row.roll,
        "name": row.name,
        "fatherName": row.father_name,
        "motherName": row.mother_name,
        "village": row.village,
        "mobile": row.mobile,
        "studentClass": row.student_class,
        "year": row.year,
    }


def result_to_record(row: Result) -> dict:
    return {
        "id": row.id,
        "studentId": row.student_id,
        "examName": row.exam_name,
        "class": row.class_name,
        "year": row.year,
        "marks": row.marks,
        "totalMarks": row.total_marks,
        "grade": row.grade,
        "isPublished": row.is_published,
    }


def load_snapshot(db: Session) -> Snapshot:
    """Full re-fetch of students, results and subject catalog in one go."""
    students = db.query(Student).order_by(Student.created_at, Student.id).all()
    results = db.query(Result).order_by(Result.created_at, Result.id).all()
    catalogs = db.query(SubjectCatalog).all()
    return build_snapshot(
        [student_to_record(s) for s in students],
        [result_to_record(r) for r in results],
        [{"class": c.class_name, "subjects": c.subjects} for c in catalogs],
    )


# ===========================
#         STUDENTS
# ===========================

def get_student(db: Session, student_id: str) -> Optional[Student]:
    return db.query(Student).filter(Student.id == student_id).first()


def list_students(db: Session, class_name: Optional[str] = None, year: Optional[str] = None) -> List[Student]:
    query = db.query(Student)
    if class_name:
        query = query.filter(Student.student_class == class_name)
    if year:
        query = query.filter(Student.year == year)
    return query.order_by(Student.created_at, Student.id).all()


def count_students(db: Session) -> int:
    return db.query(Student).count()


def add_student(db: Session, student: Student) -> Student:
    db.add(student)
    _commit(db)
    db.refresh(student)
    logger.info("Enrolled student %s (roll %s, %s %s)", student.id, student.roll, student.student_class, student.year)
    return student


def update_student(db: Session, student: Student, changes: Dict[str, object]) -> Student:
    for attr, value in changes.items():
        setattr(student, attr, value)
    _commit(db)
    db.refresh(student)
    return student


def delete_student(db: Session, student: Student):
    """Removes the student together with every result recorded for them."""
    removed = db.query(Result).filter(Result.student_id == student.id).delete()
    db.delete(student)
    _commit(db)
    logger.info("Deleted student %s and %d result(s)", student.id, removed)


# ===========================
#      SUBJECT CATALOG
# ===========================

def get_subject_catalog(db: Session) -> Dict[str, List[str]]:
    return {row.class_name: list(row.subjects or []) for row in db.query(SubjectCatalog).all()}


def set_subjects(db: Session, class_name: str, subjects: List[str]) -> List[str]:
    row = db.query(SubjectCatalog).filter(SubjectCatalog.class_name == class_name).first()
    if row:
        row.subjects = list(subjects)
    else:
        db.add(SubjectCatalog(class_name=class_name, subjects=list(subjects)))
    _commit(db)
    return list(subjects)


# ===========================
#          RESULTS
# ===========================

def get_result(db: Session, result_id: str) -> Optional[Result]:
    return db.query(Result).filter(Result.id == result_id).first()


def list_results(db: Session, class_name: str, year: str, exam_name: str) -> List[Result]:
    wanted = exam_name.strip()
    rows = db.query(Result).filter(Result.class_name == class_name, Result.year == year).all()
    return [r for r in rows if (r.exam_name or "").strip() == wanted]


def find_stored_result(db: Session, student_id: str, class_name: str, year: str, exam_name: str) -> Optional[Result]:
    """Any stored result (published or not) for the tuple; used before every upsert."""
    wanted = exam_name.strip()
    rows = db.query(Result).filter(
        Result.student_id == student_id,
        Result.class_name == class_name,
        Result.year == year,
    ).order_by(Result.created_at, Result.id).all()
    return next((r for r in rows if (r.exam_name or "").strip() == wanted), None)


def upsert_results(db: Session, records: Iterable[dict]) -> int:
    count = 0
    for record in records:
        row = get_result(db, record["id"])
        if row is None:
            row = Result(id=record["id"])
            db.add(row)
        row.student_id = record["studentId"]
        row.exam_name = record["examName"]
        row.class_name = record["class"]
        row.year = record["year"]
        row.marks = record["marks"]
        row.total_marks = record["totalMarks"]
        row.grade = record["grade"]
        row.is_published = record["isPublished"]
        count += 1
    _commit(db)
    logger.info("Upserted %d result(s)", count)
    return count


def set_published(db: Session, rows: Iterable[Result], publish: bool) -> int:
    count = 0
    for row in rows:
        row.is_published = publish
        count += 1
    _commit(db)
    logger.info("%s %d result(s)", "Published" if publish else "Unpublished", count)
    return count


def delete_result(db: Session, row: Result):
    db.delete(row)
    _commit(db)


# ===========================
#          NOTICES
# ===========================

def get_notice(db: Session, notice_id: str) -> Optional[Notice]:
    return db.query(Notice).filter(Notice.id == notice_id).first()


def list_notices(db: Session) -> List[Notice]:
    return db.query(Notice).order_by(Notice.id.desc()).all()


def add_notice(db: Session, notice: Notice) -> Notice:
    db.add(notice)
    _commit(db)
    db.refresh(notice)
    return notice


def delete_notice(db: Session, notice: Notice):
    db.delete(notice)
    _commit(db)


# ===========================
#          SETTINGS
# ===========================

def get_setting(db: Session, key: str) -> Optional[str]:
    row = db.query(AppSetting).filter(AppSetting.key == key).first()
    return row.value if row else None


def set_setting(db: Session, key: str, value: str):
    row = db.query(AppSetting).filter(AppSetting.key == key).first()
    if row:
        row.value = value
    else:
        db.add(AppSetting(key=key, value=value))
    _commit(db)


def clear_all_data(db: Session):
    """Wipes students, results, subject catalogs and notices. Settings survive."""
    db.query(Result).delete()
    db.query(Student).delete()
    db.query(SubjectCatalog).delete()
    db.query(Notice).delete()
    _commit(db)
    logger.warning("All school data cleared")
