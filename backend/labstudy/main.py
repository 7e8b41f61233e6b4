# labstudy/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from labstudy.errors import LabStudyError
from labstudy.routers.auth import router as auth_router
from labstudy.routers.participants import router as participants_router
from labstudy.routers.studies import router as studies_router
from labstudy.routers.sessions import router as sessions_router
from labstudy.settings import get_settings

log = logging.getLogger("uvicorn")

app = FastAPI(
    title="Lab Study Manager API",
    openapi_tags=[
        {"name": "auth", "description": "Signup, login & cookie session"},
        {"name": "participants", "description": "Study participants"},
        {"name": "studies", "description": "Studies"},
        {"name": "sessions", "description": "Participant visits with audit history"},
    ],
)

# Cookie auth needs an explicit origin list; "*" is not allowed with credentials
ALLOW_ORIGINS = get_settings().ALLOW_ORIGINS.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(LabStudyError)
async def lab_study_error_handler(request: Request, exc: LabStudyError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

@app.get("/api/health")
def health():
    return {"ok": True}

# Routers
app.include_router(auth_router)
app.include_router(participants_router)
app.include_router(studies_router)
app.include_router(sessions_router)
