"""Outreach - affiliate outreach CRM FastAPI Application."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from outreach.config import get_settings
from outreach.api import (
    contacts,
    sheets,
    emails,
    calendar,
    blocklist,
    daily_queue,
    dashboard,
    automation,
)
from outreach.services.database import init_db, close_db
from outreach.scheduler.jobs import start_scheduler, stop_scheduler

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await init_db()
    await start_scheduler()

    yield

    # Shutdown
    await stop_scheduler()
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Outreach CRM for affiliate contacts, spreadsheet imports and follow-ups",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(contacts.router, prefix="/api/v1/contacts", tags=["Contacts"])
app.include_router(sheets.router, prefix="/api/v1/sheets", tags=["Google Sheets"])
app.include_router(emails.router, prefix="/api/v1/emails", tags=["Emails"])
app.include_router(calendar.router, prefix="/api/v1/calendar", tags=["Calendar"])
app.include_router(blocklist.router, prefix="/api/v1/blocklist", tags=["Blocklist"])
app.include_router(daily_queue.router, prefix="/api/v1/daily-queue", tags=["Daily Queue"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
app.include_router(automation.router, prefix="/api/v1/automation", tags=["Automation"])


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "docs": "/docs",
        "health": "/health",
    }
