import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Config
from database import engine, Base

# --- IMPORT ROUTERS (APIs) ---
from routers import auth, dashboard, marksheet, notices, results, settings, students, subjects

# --- IMPORT MODELS (registers the tables on Base) ---
from models.students import Student
from models.results import Result
from models.subjects import SubjectCatalog
from models.notices import Notice
from models.settings import AppSetting
from services.store import StoreError

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# --- CREATE DATABASE TABLES ---
Base.metadata.create_all(bind=engine)

app = FastAPI(title="School Result Portal")

# ==========================================
# CORS (portal frontend)
# ==========================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Could not save changes, please try again"})


# --- REGISTER ROUTERS ---
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(notices.router)
app.include_router(subjects.router)
app.include_router(students.router)
app.include_router(results.router)
app.include_router(marksheet.router)
app.include_router(settings.router)

logger.info("School Result Portal ready (%s)", engine.url.get_backend_name())
