from fastapi import APIRouter, Depends, Form, HTTPException
from sqlalchemy.orm import Session
from datetime import datetime
from typing import List
import time

from database import get_db
from models.notices import Notice
from routers.auth import require_teacher
from schemas.notices import NoticeSchema
from services import store

router = APIRouter(prefix="/api/v1/notices", tags=["Notice Board"])


def _new_notice_id(db: Session) -> str:
    # millisecond timestamp, bumped on collision
    candidate = int(time.time() * 1000)
    while store.get_notice(db, str(candidate)):
        candidate += 1
    return str(candidate)


# --- Public: newest first ---
@router.get("", response_model=List[NoticeSchema])
def get_notices(db: Session = Depends(get_db)):
    return store.list_notices(db)


# --- Teacher: add ---
@router.post("", response_model=NoticeSchema, status_code=201, dependencies=[Depends(require_teacher)])
def add_notice(text: str = Form(...), db: Session = Depends(get_db)):
    text = text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Notice text is required")
    notice = Notice(
        id=_new_notice_id(db),
        text=text,
        date=datetime.now().strftime("%d/%m/%Y"),
    )
    return store.add_notice(db, notice)


# --- Teacher: delete ---
@router.delete("/{notice_id}", dependencies=[Depends(require_teacher)])
def delete_notice(notice_id: str, db: Session = Depends(get_db)):
    notice = store.get_notice(db, notice_id)
    if not notice:
        raise HTTPException(status_code=404, detail="Notice not found")
    store.delete_notice(db, notice)
    return {"status": "deleted"}
