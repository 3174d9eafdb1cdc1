import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from coachhub.db_init import ensure_indexes
from coachhub.errors import CoachHubError
from coachhub.middleware.audit_middleware import AuditMiddleware
from coachhub.routes import auth, comments, files, profile, relationships, shares

logger = logging.getLogger(__name__)

app = FastAPI(title="CoachHub", version="1.0.0")

app.add_middleware(AuditMiddleware)

# Routers
app.include_router(auth.router)
app.include_router(files.router)
app.include_router(comments.router)
app.include_router(shares.router)
app.include_router(profile.router)
app.include_router(relationships.router)


@app.on_event("startup")
def _startup():
    try:
        ensure_indexes()
    except Exception as e:
        logger.warning("Index init skipped: %s", e)


@app.exception_handler(CoachHubError)
async def coachhub_error_handler(request: Request, exc: CoachHubError):
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.get("/health")
def health():
    return {"status": "ok"}
