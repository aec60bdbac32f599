"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tuerauf.api.v1 import router as v1_router
from tuerauf.core.config import settings
from tuerauf.core.notifier import get_notifier
from tuerauf.services.errors import UserServiceError


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    # Let queued admin mails go out before the process exits.
    get_notifier().shutdown(wait=True)


app = FastAPI(
    title="Tuerauf API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(UserServiceError)
async def user_service_error_handler(_request: Request, exc: UserServiceError) -> JSONResponse:
    """Service errors a route did not map itself."""
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Tuerauf API"}
