"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_proxy.agents import run_registry
from agent_proxy.agents.tools import validate_registry_names
from agent_proxy.config import settings
from agent_proxy.routes import agent, health

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate tool config. Shutdown: cancel in-flight agent runs."""
    validate_registry_names(settings.registry_tools)
    logger.info("Search engine: %s", settings.search_engine.value)
    yield
    await run_registry.shutdown()


app = FastAPI(
    title="Agent Proxy",
    description="LangChain tool agent — streaming chat proxy",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(agent.router)
