# main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from connectus.config import settings
from connectus.config import build_sqlalchemy_db_url
from connectus.database import Base, engine
from connectus.models import Application, Job, Payment, User  # noqa: F401  # register tables
from connectus.routers import ai, applications, auth, chatbot, jobs, profile
from connectus.routers.health import router as health_router
from connectus.services.application_service import RESUME_URL_PREFIX, resume_dir
from connectus.services.skill_extractor import get_term_extractor


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Term extractor is stateless after construction; build it once.
        app.state.term_extractor = get_term_extractor()
        yield

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)

    prefix = settings.api_prefix
    application.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    application.include_router(profile.router, prefix=f"{prefix}/profile", tags=["profile"])
    application.include_router(jobs.router, prefix=f"{prefix}/jobs", tags=["jobs"])
    application.include_router(applications.router, prefix=f"{prefix}/applications", tags=["applications"])
    application.include_router(ai.router, prefix=f"{prefix}/ai", tags=["ai"])
    application.include_router(chatbot.router, prefix=f"{prefix}/chatbot", tags=["chatbot"])

    # Uploaded resumes are public, directly downloadable files.
    application.mount(
        RESUME_URL_PREFIX,
        StaticFiles(directory=str(resume_dir(settings.upload_dir))),
        name="resumes",
    )

    # For local/test sqlite usage, auto-create ORM tables; other backends are migrated explicitly.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
