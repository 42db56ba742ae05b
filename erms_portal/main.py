import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from .core.api_client import ApiError, close_client, get_client
from .core.auth import PageRedirect
from .core.config import settings
from .routers import assignments, engineer, engineers, manager, profile, projects, session

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await get_client()  # Warm client on startup
    yield
    await close_client()


app = FastAPI(
    title="ERMS Portal",
    version="1.0.0",
    lifespan=lifespan,
)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

configured_origins = settings.cors_origin_list()
if "*" in configured_origins:
    allowed_origins = ["*"]
else:
    allowed_origins = list(dict.fromkeys(configured_origins + DEFAULT_CORS_ORIGINS))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials="*" not in allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(PageRedirect)
async def page_redirect_handler(request: Request, exc: PageRedirect):
    response = RedirectResponse(exc.location)
    if exc.clear_token:
        response.delete_cookie(settings.token_cookie_name)
    return response


app.include_router(session.router, tags=["session"])
app.include_router(manager.router, tags=["manager"])
app.include_router(engineer.router, tags=["engineer"])
app.include_router(profile.router, tags=["profile"])
app.include_router(engineers.router, prefix=settings.api_prefix, tags=["engineers"])
app.include_router(projects.router, prefix=settings.api_prefix, tags=["projects"])
app.include_router(assignments.router, prefix=settings.api_prefix, tags=["assignments"])


@app.get("/health")
async def health():
    return {"status": "ok"}
