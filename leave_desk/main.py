import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import auth, health, me, departments, faculties, leave_types, leaves, uploads
from .models import Base
from .db import engine
from .core.config import settings
from .core.errors import register_exception_handlers

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Faculty Leave Desk API")


@app.on_event("startup")
def on_startup():
    if settings.auto_db_bootstrap:
        # Create tables in dev if missing; alembic owns the schema elsewhere.
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")


register_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(me.router)
app.include_router(departments.router)
app.include_router(faculties.router)
app.include_router(leave_types.router)
app.include_router(leaves.router)
app.include_router(uploads.router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
