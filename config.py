# backend/config.py
import os
from dotenv import load_dotenv
from pathlib import Path

# ============================================================
# 🌍 DETECTAR ENTORNO Y CARGAR .env CORRESPONDIENTE
# ============================================================
ENV = os.getenv("ENV", "production" if "PASSENGER_ENV" in os.environ else "development")

env_file = ".env.production" if ENV == "production" else ".env.development"
dotenv_path = Path(__file__).resolve().parent / env_file
load_dotenv(dotenv_path)

DEFAULT_ORIGINS = "http://localhost:4200,http://localhost:4201"

# ============================================================
# ⚙️ CONFIGURACIÓN GENERAL
# ============================================================
class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "MusicStream")
    VERSION: str = os.getenv("VERSION", "1.0")

    # 🔹 Base relacional de tracks
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./musicstream.db")

    # 🔹 Almacenamiento de archivos subidos (audio + portadas)
    STORAGE_LOCATION: str = os.getenv("STORAGE_LOCATION", "uploads")

    # 🔹 Otros
    API_PREFIX: str = os.getenv("API_PREFIX", "").rstrip("/")
    ALLOWED_ORIGINS: list = os.getenv("ALLOWED_ORIGINS", DEFAULT_ORIGINS).split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG: bool = ENV == "development"
    ENV: str = ENV

settings = Settings()
