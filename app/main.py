# ============================================================
#   DermFinder Clinic API
#   Fuzzy / synonym-aware clinic search + rate limiting
# ============================================================

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Rate limiting
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.api.v1.router import api_router
from app.core.config import get_settings
from app.utils.sentry import init_sentry

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

settings = get_settings()

# ============================================================
# LOGGING + SENTRY
# ============================================================
logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
logger = logging.getLogger(__name__)

init_sentry()

# ============================================================
# FASTAPI APP + RATE LIMITING
# ============================================================
app = FastAPI(title=settings.PROJECT_NAME)

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ============================================================
# CORS
# ============================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================
# REGISTER ROUTERS
# ============================================================
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME, "status": "OK"}


logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)

# ============================================================
# UVICORN ENTRYPOINT
# ============================================================
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
