from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from schemas.auth import PasswordChangeSchema, TeacherLogin, Token
from services import auth_service
from services.auth_service import Anonymous, AuthState, Authenticated, PasswordChangeError, TeacherSession

router = APIRouter(prefix="/auth", tags=["Authentication"])
security = HTTPBearer(auto_error=False)


# ===========================
#       DEPENDENCIES
# ===========================

def get_auth_state(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> AuthState:
    token = credentials.credentials if credentials else None
    return auth_service.resolve_auth_state(db, token)


def require_teacher(state: AuthState = Depends(get_auth_state)) -> TeacherSession:
    if isinstance(state, Authenticated):
        return state.session
    raise HTTPException(
        status_code=401,
        detail="Session expired, please login again",
        headers={"WWW-Authenticate": "Bearer"},
    )


# ===========================
#        API ENDPOINTS
# ===========================

# 1. LOGIN
@router.post("/login", response_model=Token)
def teacher_login(data: TeacherLogin, db: Session = Depends(get_db)):
    if not auth_service.authenticate_teacher(db, data.password):
        raise HTTPException(status_code=401, detail="Incorrect password")
    return {"access_token": auth_service.create_access_token(db), "token_type": "bearer"}


# 2. WHO AM I (frontend uses this to show the teacher panel or the login modal)
@router.get("/me")
def who_am_i(state: AuthState = Depends(get_auth_state)):
    if isinstance(state, Anonymous):
        return {"authenticated": False}
    return {
        "authenticated": True,
        "role": state.session.subject,
        "expires_at": state.session.expires_at.isoformat(),
    }


# 3. CHANGE PASSWORD (logs every session out)
@router.post("/change-password", dependencies=[Depends(require_teacher)])
def change_password(payload: PasswordChangeSchema, db: Session = Depends(get_db)):
    try:
        auth_service.change_password(db, payload.current, payload.new, payload.confirm)
    except PasswordChangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Password changed. Please login again."}
