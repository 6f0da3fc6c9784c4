# Invoice Studio backend entrypoint: FastAPI app, routers and error mapping.

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api import company_profiles
from backend.app.api import config
from backend.app.api import invoice_templates
from backend.app.api import invoices
from backend.app.api import login
from backend.app.api import packages
from backend.app.api import passwords
from backend.app.api import payment_methods
from backend.app.api import profile
from backend.app.api import register
from backend.app.api import services
from backend.app.api import team_members
from backend.app.core.dev_seed import ensure_default_dev_owner
from backend.app.core.errors import InvoiceStudioError, StorageUnavailableError
from backend.app.core.logging import setup_logging
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import database

settings = get_settings()
logger = logging.getLogger("backend")

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api"

app.include_router(register.router, prefix=API_PREFIX)
app.include_router(login.router, prefix=API_PREFIX)
app.include_router(passwords.router, prefix=API_PREFIX)
app.include_router(profile.router, prefix=API_PREFIX)
app.include_router(services.router, prefix=API_PREFIX)
app.include_router(packages.router, prefix=API_PREFIX)
app.include_router(company_profiles.router, prefix=API_PREFIX)
app.include_router(payment_methods.router, prefix=API_PREFIX)
app.include_router(invoice_templates.router, prefix=API_PREFIX)
app.include_router(invoices.router, prefix=API_PREFIX)
app.include_router(team_members.router, prefix=API_PREFIX)
app.include_router(config.router, prefix=API_PREFIX)


@app.exception_handler(InvoiceStudioError)
async def handle_domain_error(request: Request, exc: InvoiceStudioError):
    if isinstance(exc, StorageUnavailableError):
        logger.error("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_database():
    setup_logging(settings.log_level)
    Base.metadata.create_all(bind=database.engine)
    db = database.session()
    try:
        ensure_default_dev_owner(db)
    finally:
        db.close()
