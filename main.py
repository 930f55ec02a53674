from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
import pytz
from school_portal.core.config import settings as app_settings
from school_portal.portal import Portal
from school_portal.routers import theme
from school_portal.theme.context import ThemeContext

# Configure logging
logging.basicConfig(
    level=getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

timezone = pytz.timezone(app_settings.TIMEZONE)

# Initialize scheduler with timezone
scheduler = AsyncIOScheduler(timezone=timezone)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting School Portal...")

    app.state.theme = ThemeContext.from_settings(app_settings)
    logger.info(
        f"Theme loaded - primary {app.state.theme.primary_color}, "
        f"{app.state.theme.color_scheme} scheme"
    )

    scheduler.start()
    app.state.portal = await Portal.create(app_settings, theme=app.state.theme, scheduler=scheduler)
    app.state.portal.start()
    logger.info(f"Scheduler started ({app_settings.TIMEZONE})")

    yield

    # Shutdown
    logger.info("Shutting down School Portal...")
    await app.state.portal.aclose()
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")


app = FastAPI(
    title="School Portal",
    description="Theme and data-access portal for the multi-branch school management API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint with scheduler status"""
    scheduler_status = "running" if scheduler.running else "stopped"
    theme_ctx = getattr(app.state, "theme", None)

    return {
        "status": "ok",
        "service": "school-portal",
        "scheduler": scheduler_status,
        "api_url": app_settings.API_URL,
        "theme_version": theme_ctx.version if theme_ctx else None,
        "timezone": app_settings.TIMEZONE
    }


app.include_router(theme.router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=app_settings.PORT, reload=True)
