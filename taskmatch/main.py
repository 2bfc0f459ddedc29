from taskmatch.database.database import create_db_and_tables, engine
from taskmatch.utils.logger import setup_logging
from contextlib import asynccontextmanager
from taskmatch.core.config import get_settings, parse_comma_separated_origins
from taskmatch.core.error_handlers import register_exception_handlers
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from taskmatch.routers import ngo, task, user
from taskmatch.core.telemetry import setup_telemetry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Perform application startup tasks before the FastAPI app begins serving requests.

    Runs logging setup, creates the database tables, and initializes telemetry for the
    app and its database engine.
    """
    setup_logging()
    create_db_and_tables()
    setup_telemetry(app, engine)
    yield


app = FastAPI(
    title="TaskMatch API",
    description="Volunteer task matching: NGOs post tasks, volunteers apply and log their hours",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        str(origin).rstrip("/")
        for origin in parse_comma_separated_origins(get_settings().BACKEND_CORS_ORIGINS)
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health", include_in_schema=False)
def health_check():
    """
    Provide the application's liveness state for health checks.

    Returns:
        dict: A mapping with key "status" and value "ok" indicating the service is healthy.
    """
    return {"status": "ok"}


app.include_router(task.router)
app.include_router(ngo.router)
app.include_router(user.router)
