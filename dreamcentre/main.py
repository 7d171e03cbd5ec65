"""Main FastAPI application"""
from fastapi import FastAPI
from dreamcentre.config import ConfigurationError, Settings, get_settings, load_task_settings
from dreamcentre.middleware.cors import setup_cors
from dreamcentre.middleware.error_handler import ErrorHandlerMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# APScheduler setup
scheduler = None


def setup_scheduler(settings: Settings):
    """Start the background scheduler for the Supabase housekeeping procedures"""
    global scheduler
    if not settings.scheduled_tasks_enabled:
        logger.info("Scheduled tasks disabled")
        return None

    try:
        load_task_settings()
    except ConfigurationError as e:
        logger.error(f"Scheduled tasks not started: {e}")
        return None

    from apscheduler.schedulers.background import BackgroundScheduler
    from dreamcentre.tasks.scheduled import run_scheduled_job

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_scheduled_job,
        'interval',
        minutes=settings.scheduled_tasks_interval_minutes,
        id='run_scheduled_tasks',
        name='Publish scheduled events and archive past events',
        replace_existing=True
    )
    scheduler.start()
    logger.info(
        f"Background scheduler started - running scheduled tasks every "
        f"{settings.scheduled_tasks_interval_minutes} minutes"
    )
    return scheduler


def shutdown_scheduler():
    """Shutdown the scheduler gracefully"""
    global scheduler
    if scheduler:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Background scheduler stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_scheduler(settings)
        yield
        shutdown_scheduler()

    app = FastAPI(
        title="Dream Centre API",
        description="Contact relay and scheduled housekeeping for the Abbaquar-San Dream Centre website",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    setup_cors(app, settings)
    app.add_middleware(
        ErrorHandlerMiddleware,
        expose_details=settings.environment == "development"
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "dreamcentre-backend",
            "scheduler": "running" if scheduler and scheduler.running else "stopped"
        }

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Dream Centre Backend API",
            "version": API_VERSION,
            "docs": "/docs"
        }

    from dreamcentre.routers import contact

    app.include_router(contact.router, prefix="/api/contact", tags=["Contact"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
