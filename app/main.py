from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
from sqlalchemy import text
import asyncio
import logging
import os
from app.routes import location, alert, site, shift, ws
from app.database import engine, Base
from app.services.notifier import Notifier, WSManager

# Import all models to ensure they are registered with SQLAlchemy
from app.db.models import User, Site, Shift, GuardLocation, Alert

logger = logging.getLogger(__name__)

# Configure logging to show API requests
logging.getLogger("uvicorn.access").setLevel(logging.INFO)
logging.getLogger("fastapi").setLevel(logging.INFO)

# CORS configuration
DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

def _cors_origins():
    configured = os.getenv("CORS_ORIGINS")
    if configured:
        return [o.strip() for o in configured.split(",") if o.strip()]
    return DEFAULT_ORIGINS

def _init_database():
    # Only create tables automatically in dev, not production
    if os.getenv("ENV", "production") == "production":
        return
    logger.info("Development mode: creating tables if they don't exist")
    Base.metadata.create_all(bind=engine)

    from app.init_db import seed
    seed()
    logger.info("Database seeded")

def create_app(notifier: Optional[Notifier] = None, init_database: bool = True) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database:
            _init_database()
        if isinstance(app.state.notifier, WSManager):
            app.state.notifier.bind_loop(asyncio.get_running_loop())
        yield

    app = FastAPI(
        title="Patrol Tracking Backend",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.notifier = notifier if notifier is not None else WSManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(location.router)
    app.include_router(alert.router)
    app.include_router(site.router)
    app.include_router(shift.router)
    app.include_router(ws.router)

    @app.get("/health")
    def health():
        """Health check endpoint for Docker health checks"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "healthy", "database": "connected"}
        except Exception as e:
            return {"status": "unhealthy", "database": "disconnected", "error": str(e)}

    return app

app = create_app()
