from fastapi import FastAPI

from src.api.routes import chat
from src.config.settings import get_settings
from src.utils.logger import setup_logging

setup_logging()
settings = get_settings()

app = FastAPI(
    title=settings.API_TITLE,
    description="AI assistant for board documents: structured analysis with graceful degradation",
    version=settings.API_VERSION,
    debug=settings.DEBUG,
)

app.include_router(chat.router, prefix="/api")


@app.get("/")
def read_root():
    return {
        "status": "BoardBravo Assistant is Online",
        "version": settings.API_VERSION,
        "provider": settings.AI_PROVIDER,
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}
