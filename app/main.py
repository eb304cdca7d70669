import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.datasets import router as datasets_router
from app.api.v1.profile import router as profile_router
from insights import config


def create_app() -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Data Insights Backend",
        description="Upload a CSV/JSON table, get automatic charts, and chat with a model about the data.",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict:
        return {"status": "ok"}

    # Versioned API routes
    app.include_router(datasets_router, prefix="/v1/datasets", tags=["datasets"])
    app.include_router(profile_router, prefix="/v1/profile", tags=["profile"])

    return app


app = create_app()
