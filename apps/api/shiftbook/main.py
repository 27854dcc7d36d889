import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftbook.core.config import settings
from shiftbook.core.errors import SchedulingError, ValidationError
from shiftbook.routers.shifts import router as shifts_router
from shiftbook.routers.bookings import router as bookings_router
from shiftbook.routers.dashboard import router as dashboard_router
from shiftbook.routers.profiles import router as profiles_router

logging.basicConfig(
  level=settings.log_level.upper(),
  format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("shiftbook")

app = FastAPI(title="Shift Booking API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:8081,http://127.0.0.1:8081,https://shifts.example.com"
allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

# Safe fallback for local dev if env var not set
if not allow_origins:
  allow_origins = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
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


@app.exception_handler(SchedulingError)
def scheduling_error_handler(request: Request, exc: SchedulingError):
  # 403 renders as "access denied", 503 as "try again", the rest inline
  if exc.status_code >= 500:
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.detail)
  return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
  # malformed bodies, paths and query strings get the same typed shape
  problems = []
  for err in exc.errors():
    where = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    problems.append(f"{where}: {err.get('msg')}" if where else err.get("msg", ""))
  error = ValidationError("; ".join(problems) or "Invalid request")
  return JSONResponse(status_code=error.status_code, content=error.to_dict())


app.include_router(shifts_router, prefix="/shifts", tags=["shifts"])
app.include_router(bookings_router, prefix="/bookings", tags=["bookings"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
app.include_router(profiles_router, prefix="/profiles", tags=["profiles"])

@app.get("/health")
def health():
  return {"status": "ok"}
