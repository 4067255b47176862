from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rotaplan.core.config import settings
from rotaplan.core.logging_config import configure_logging
from rotaplan.routers.admin import router as admin_router
from rotaplan.routers.assignments import router as assignments_router
from rotaplan.routers.auth import router as auth_router
from rotaplan.routers.custom_schedules import router as custom_schedules_router
from rotaplan.routers.employee_schedule import router as employee_schedule_router
from rotaplan.routers.employees import router as employees_router
from rotaplan.routers.schedule import router as schedule_router
from rotaplan.routers.templates import router as templates_router

configure_logging()

app = FastAPI(title="Rotaplan API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:8081,http://127.0.0.1:8081"
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

app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(admin_router, prefix="/admin", tags=["admin"])
app.include_router(employees_router, prefix="/employees", tags=["employees"])
app.include_router(assignments_router, prefix="/assignments", tags=["assignments"])
app.include_router(templates_router, prefix="/templates", tags=["templates"])
app.include_router(custom_schedules_router, prefix="/custom-schedules", tags=["custom-schedules"])
app.include_router(schedule_router, prefix="/shifts", tags=["shifts"])
app.include_router(employee_schedule_router, prefix="/me", tags=["me"])

@app.get("/health")
def health():
  return {"status": "ok"}
