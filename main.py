from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import settings
from database.connection import SessionLocal, build_engine, build_session_factory, engine, init_db
from services.storage_service import StorageService
from services.track_service import TrackService
import logging

# =====================================================
# * Importación de Routers
# =====================================================
from routes.track_routes import router as track_router
from routes.file_routes import router as file_router

# =====================================================
# * Configuración de Logging global
# =====================================================
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger("main")


def create_app(database_url: Optional[str] = None, storage_location: Optional[str] = None) -> FastAPI:
    """
    Construye la aplicación con su base de datos y almacenamiento.
    Sin argumentos usa la configuración del entorno (settings).
    """
    # =====================================================
    # * Inicialización de la aplicación
    # =====================================================
    app = FastAPI(
        title=f"{settings.PROJECT_NAME} Backend",
        version=settings.VERSION,
        debug=settings.DEBUG
    )

    # =====================================================
    # * Configuración CORS (API y /uploads)
    # =====================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )

    # =====================================================
    # * Inicialización de Base de Datos y Almacenamiento
    # =====================================================
    if database_url:
        db_engine = build_engine(database_url)
        session_factory = build_session_factory(db_engine)
    else:
        db_engine, session_factory = engine, SessionLocal
    init_db(db_engine)

    storage = StorageService(storage_location or settings.STORAGE_LOCATION)
    storage.init()

    app.state.storage = storage
    app.state.track_service = TrackService(session_factory, storage)

    logger.info("✅ Base de datos y almacenamiento listos.")

    # =====================================================
    # * Registro de Rutas
    # =====================================================
    app.include_router(track_router, prefix=f"{settings.API_PREFIX}/tracks", tags=["Tracks"])
    app.include_router(file_router, prefix="/uploads", tags=["Uploads"])

    logger.info("📜 Routers registrados:")
    logger.info(f" - {settings.API_PREFIX}/tracks -> TrackRouter")
    logger.info(" - /uploads -> FileRouter")

    # =====================================================
    # * Ruta raíz
    # =====================================================
    @app.get("/", summary="Ruta raíz del backend")
    def root():
        return {
            "message": f"🚀 {settings.PROJECT_NAME} Backend activo",
            "version": settings.VERSION,
            "env": settings.ENV
        }

    return app


app = create_app()

# =====================================================
# * Mensaje de arranque
# =====================================================
logger.info(f"🌍 {settings.PROJECT_NAME} backend iniciado en modo '{settings.ENV}'.")
