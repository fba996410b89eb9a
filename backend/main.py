# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import settings
from database import SessionLocal, init_db
from models.legal import LegalContent
from utils.errors import ExchangeError
from utils.storage import AVATAR_URL_PREFIX, ensure_avatar_dir

# Router imports
from routes.auth import router as auth_router
from routes.workflows import router as workflows_router
from routes.profile import router as profile_router
from routes.catalog import router as catalog_router
from routes.offers import router as offers_router
from routes.requests import router as requests_router
from routes.marketplace import router as marketplace_router
from routes.ratings import router as ratings_router
from routes.reports import router as reports_router
from routes.admin import router as admin_router
from routes.legal import router as legal_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_TERMS = (
    "Listings must describe genuine, unexpired stock held by the listing pharmacy. "
    "Exchanges are arranged directly between pharmacies; the platform is not a party to them."
)


def seed_defaults():
    db = SessionLocal()
    try:
        if not db.query(LegalContent).filter(LegalContent.type == "terms").first():
            db.add(LegalContent(type="terms", content=DEFAULT_TERMS))
            db.commit()
    finally:
        db.close()


# Initialization
init_db()
seed_defaults()

app = FastAPI(title="Nafaa Exchange API", version="1.0.0")

# Avatars - make sure the directory exists
app.mount(AVATAR_URL_PREFIX, StaticFiles(directory=str(ensure_avatar_dir())), name="avatars")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain failures raised below the route layer
@app.exception_handler(ExchangeError)
async def exchange_error_handler(request: Request, exc: ExchangeError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Anything unexpected: log it, never echo backend error text
@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong. Please try again."})


# Router registration
app.include_router(auth_router)
app.include_router(workflows_router)
app.include_router(profile_router)
app.include_router(catalog_router)
app.include_router(offers_router)
app.include_router(requests_router)
app.include_router(marketplace_router)
app.include_router(ratings_router)
app.include_router(reports_router)
app.include_router(admin_router)
app.include_router(legal_router)
app.include_router(logs_router)


@app.get("/")
def read_root():
    return {"message": "Nafaa Exchange API is running"}
