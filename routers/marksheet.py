from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
import os

from config import Config
from database import get_db
from schemas.marksheet import BatchMarksheet, MarksheetSearch, RankResponse, SearchState
from services import store
from services.marksheet import SORT_BY_RANK, SORT_BY_ROLL, build_batch_marksheet, search_marksheet
from services.ranking import get_rank, rank_score
from services.snapshot import Snapshot

router = APIRouter(tags=["Marksheet"])
templates = Jinja2Templates(directory=os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates"))


# Fresh snapshot per request, the core never sees the session
def get_snapshot(db: Session = Depends(get_db)) -> Snapshot:
    return store.load_snapshot(db)


def _check_sort(sort_by: str) -> str:
    if sort_by not in (SORT_BY_ROLL, SORT_BY_RANK):
        raise HTTPException(status_code=400, detail="sort_by must be 'roll' or 'rank'")
    return sort_by


# ===========================
#      PUBLIC JSON API
# ===========================

@router.get("/api/v1/marksheet/search", response_model=MarksheetSearch)
def search_individual(
    roll: str,
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    snapshot: Snapshot = Depends(get_snapshot),
):
    return search_marksheet(snapshot, roll, class_name, year, exam)


@router.get("/api/v1/marksheet/batch", response_model=BatchMarksheet)
def merit_list(
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    sort_by: str = SORT_BY_ROLL,
    snapshot: Snapshot = Depends(get_snapshot),
):
    return build_batch_marksheet(snapshot, class_name, year, exam, _check_sort(sort_by))


@router.get("/api/v1/marksheet/rank", response_model=RankResponse)
def student_rank(
    student_id: str,
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    snapshot: Snapshot = Depends(get_snapshot),
):
    rank = get_rank(snapshot, student_id, class_name, year, exam)
    if rank is None:
        return RankResponse(student_id=student_id)
    return RankResponse(student_id=student_id, rank=rank, score=rank_score(snapshot, student_id, class_name, year, exam))


# ===========================
#      PRINT VIEWS (HTML)
# ===========================

@router.get("/marksheet/print", response_class=HTMLResponse)
def print_marksheet(
    request: Request,
    roll: str,
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    snapshot: Snapshot = Depends(get_snapshot),
):
    search = search_marksheet(snapshot, roll, class_name, year, exam)
    status_code = 200 if search.state == SearchState.FOUND else 404
    return templates.TemplateResponse(request, "print_marksheet.html", {
        "school_name": Config.SCHOOL_NAME,
        "search": search,
        "sheet": search.marksheet,
    }, status_code=status_code)


@router.get("/marksheet/print-batch", response_class=HTMLResponse)
def print_merit_list(
    request: Request,
    class_name: str = Query(..., alias="class"),
    year: str = Query(...),
    exam: str = Query(...),
    sort_by: str = SORT_BY_ROLL,
    snapshot: Snapshot = Depends(get_snapshot),
):
    batch = build_batch_marksheet(snapshot, class_name, year, exam, _check_sort(sort_by))
    return templates.TemplateResponse(request, "print_bulk.html", {
        "school_name": Config.SCHOOL_NAME,
        "batch": batch,
    })
