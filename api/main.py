import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core import db, errors, log
from projects import router as projects_router
from threads import router as threads_router


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_tables_on_startup() -> bool:
    return os.environ.get("DB_CREATE_ALL", "true").strip().lower() in ("1", "true", "yes")


@asynccontextmanager
async def lifespan(_: FastAPI):
    log.configure_logging()
    # Initialize the DB engine once per process.
    await db.init_engine()
    if create_tables_on_startup():
        await db.create_all()
    try:
        yield
    finally:
        await db.close_engine()


app = FastAPI(lifespan=lifespan)

# Allow local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.install_exception_handlers(app)

app.include_router(threads_router.router, tags=["threads"])
app.include_router(projects_router.router, tags=["projects"])
app.include_router(auth_router.router, tags=["auth"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "forum api"}
