"""CORS middleware configuration"""
from fastapi.middleware.cors import CORSMiddleware
from dreamcentre.config import Settings


def setup_cors(app, settings: Settings):
    """
    Allow the website origins to call the API

    Args:
        app: FastAPI application instance
        settings: Application settings providing cors_origins
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
