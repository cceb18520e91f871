# menuboard/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from menuboard.middleware import LoggingMiddleware, RequestIdMiddleware
from menuboard.db import Base, SessionLocal, engine
from menuboard.config import settings
from menuboard.errors import MenuboardError
from menuboard.bootstrap import ensure_admin
from menuboard.util.logs import configure_logging
import menuboard.models  # noqa: F401  registers tables

from menuboard.routers import auth, menu, promotions, public, reports, users
from menuboard.routers import settings as settings_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("menuboard.api")

app = FastAPI(title="Menuboard API", version="0.1.0")

@app.on_event("startup")
def init_db():
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        ensure_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)

# Middlewares (last added runs outermost)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Every error body is {"error": message}
@app.exception_handler(MenuboardError)
async def domain_error_handler(request: Request, exc: MenuboardError):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(exc.message, extra={"route": request.url.path, "status": exc.status_code})
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(str(exc.detail), extra={"route": request.url.path, "status": exc.status_code})
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{where}: {first.get('msg', 'invalid request')}" if where else first.get("msg", "invalid request")
    return JSONResponse({"error": message}, status_code=400)

app.include_router(auth.router)
app.include_router(menu.router)
app.include_router(promotions.router)
app.include_router(settings_router.router)
app.include_router(reports.router)
app.include_router(public.router)
app.include_router(users.router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
