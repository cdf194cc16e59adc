import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

load_dotenv(os.path.join(BASE_DIR, ".env"))


def _split_env(name: str, default: str):
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./school.db")

    # JWT for the teacher panel
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

    # Used only until a teacher sets their own password
    DEFAULT_TEACHER_PASSWORD = os.getenv("DEFAULT_TEACHER_PASSWORD", "admin123")
    MIN_PASSWORD_LENGTH = 4

    SCHOOL_NAME = os.getenv("SCHOOL_NAME", "আনওয়ারুল কুরআন একাডেমী")

    CLASSES = _split_env("CLASSES", "প্লে,নার্সারী,প্রথম,দ্বিতীয়,তৃতীয়,চতুর্থ,পঞ্চম")
    YEARS = _split_env("YEARS", "২০২৬,২০২৭,২০২৮,২০২৯,২০৩০")

    # Order matters: first term, second term, annual
    EXAM_NAMES = _split_env("EXAM_NAMES", "প্রথম সাময়িক,দ্বিতীয় সাময়িক,বার্ষিক পরীক্ষা")

    CORS_ORIGINS = _split_env("CORS_ORIGINS", "http://localhost:3000")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


if len(Config.EXAM_NAMES) != 3:
    raise RuntimeError("EXAM_NAMES must list exactly three exams: first term, second term, annual.")
