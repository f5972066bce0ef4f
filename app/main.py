import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s"
)

logger = logging.getLogger(__name__)

from app.db import Base, engine
from app.models import activity, security_checks, trackers, user  # noqa: F401  (register tables)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("MySpace Security API starting up")
    Base.metadata.create_all(bind=engine)
    logger.info("Startup completed")
    yield


app = FastAPI(
    title="MySpace Security API",
    version="1.0.0",
    lifespan=lifespan,
)

from app.middleware.request_logging import RequestLoggingMiddleware
app.add_middleware(RequestLoggingMiddleware)

configured_origins = os.getenv("CORS_ORIGINS", "").strip()
if configured_origins:
    allow_origins = [origin.strip() for origin in configured_origins.split(",") if origin.strip()]
else:
    allow_origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


from app.routes.auth import router as auth_router

from app.routes.password import router as password_router
from app.routes.phishing import router as phishing_router

from app.routes.todos import router as todos_router
from app.routes.digital_properties import router as digital_properties_router
from app.routes.subscriptions import router as subscriptions_router
from app.routes.screen_time import router as screen_time_router

from app.routes.activity import router as activity_router
from app.routes.dashboard import router as dashboard_router
from app.routes.guide import router as guide_router


app.include_router(auth_router)

app.include_router(password_router)
app.include_router(phishing_router)

app.include_router(todos_router)
app.include_router(digital_properties_router)
app.include_router(subscriptions_router)
app.include_router(screen_time_router)

app.include_router(activity_router)
app.include_router(dashboard_router)
app.include_router(guide_router)


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "service": "myspace-security-backend",
        "version": "1.0.0",
    }
