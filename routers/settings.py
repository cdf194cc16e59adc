from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from routers.auth import require_teacher
from schemas.auth import ResetSchema
from services import store

router = APIRouter(prefix="/api/v1/settings", tags=["Settings"], dependencies=[Depends(require_teacher)])

RESET_CONFIRMATION = "RESET"


@router.post("/reset")
def reset_system(payload: ResetSchema, db: Session = Depends(get_db)):
    if payload.confirm != RESET_CONFIRMATION:
        raise HTTPException(status_code=400, detail=f"Type {RESET_CONFIRMATION} to confirm")
    store.clear_all_data(db)
    return {"message": "System reset complete"}
