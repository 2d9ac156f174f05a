from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worksphere_admin.api.v1.router import api_router
from worksphere_admin.core.config import settings
from worksphere_admin.core.logging_config import configure_logging
from worksphere_admin.services.employee_api import employee_api

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.LOG_LEVEL)
    await employee_api.initialize(settings)
    yield
    await employee_api.close()


app = FastAPI(
    title="WorkSphere Admin API",
    description="Employee roster and workforce dashboard for the admin panel",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "WorkSphere Admin API"}
