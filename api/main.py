"""FastAPI app: cross-dialect DDL API with Bearer auth."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import db
from api.routes import router
from crossddl.config import Settings, load_env
from crossddl.databases import create_source_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load env (Key Vault), validate required settings, create engine, then yield."""
    load_env()
    settings = Settings.from_env()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is not set (Key Vault or .env)")
    if not settings.api_auth_token:
        raise RuntimeError("API_AUTH_TOKEN is not set (Key Vault or .env)")
    engine = create_source_engine(settings.database_url)
    db.set_engine(engine)
    yield
    db.set_engine(None)
    engine.dispose()


app = FastAPI(title="Cross-dialect DDL API", lifespan=lifespan)
app.include_router(router)
