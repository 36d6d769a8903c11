# Cucina API Main Entry Point
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .errors import NotFoundError, SessionStateError, ValidationError
from .routers.auth import router as auth_router
from .routers.cook import router as cook_router
from .routers.ingredients import router as ingredients_router
from .routers.inventory import router as inventory_router
from .routers.measurements import router as measurements_router
from .routers.ready import router as ready_router
from .routers.recipes import router as recipes_router
from .routers.units import router as units_router
from .settings import settings

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("cucina")

# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

app = FastAPI(title="Cucina API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(SessionStateError)
async def _session_state(request: Request, exc: SessionStateError):
    logger.info(f"Rejected session transition on {request.url.path}: {exc}")
    return JSONResponse(status_code=409, content={"detail": str(exc)})


app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(ingredients_router, prefix="/api/ingredients", tags=["ingredients"])
app.include_router(measurements_router, prefix="/api/measurements", tags=["measurements"])
app.include_router(units_router, prefix="/api/units", tags=["units"])
app.include_router(inventory_router, prefix="/api/inventory", tags=["inventory"])
app.include_router(cook_router, prefix="/api/cook", tags=["cook"])
