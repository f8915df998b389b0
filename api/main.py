from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app_state import AppState
from config import Config, default_config
from logging_config import configure_logging
from startup.config_validator import ConfigValidator
from routes.health import router as health_router
from routes.search import router as search_router


def create_app(state: Optional[AppState] = None, config: Config = default_config) -> FastAPI:
    """Build the API around an existing AppState, or one made from config"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan"""
        app_state = app.state.app_state
        if app_state is None:
            ConfigValidator(config).validate()
            app_state = AppState.from_config(config)
            app.state.app_state = app_state
        app_state.start()
        yield
        app_state.close()

    app = FastAPI(
        title="Notes Search API",
        description="Full-text search over notes, kept in sync by lifecycle events",
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store state in app for route access
    app.state.app_state = state

    app.include_router(health_router)
    app.include_router(search_router)
    return app


configure_logging(default_config.logging.level)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=default_config.api.host, port=default_config.api.port)
