"""
Main FastAPI application for the TweetCraft service.
"""
import os
import sys
import logging
from pathlib import Path
from datetime import datetime
from dotenv import load_dotenv

# Load environment variables from .env file before anything reads settings
env_path = Path(__file__).resolve().parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tweetcraft.api.scoring.routes import router as scoring_router
from tweetcraft.api.system.routes import router as system_router
from tweetcraft.api.training.routes import router as training_router
from tweetcraft.api.transcripts.routes import router as transcripts_router
from tweetcraft.api.tweets.routes import router as tweets_router
from tweetcraft.core.config import get_env_status, get_settings
from tweetcraft.db_connection import init_db
from tweetcraft.services.logging.middleware import RequestLoggingMiddleware
from tweetcraft.services.logging.service import get_logging_service, DEPLOYMENT_ID

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

settings = get_settings()

# Create FastAPI application
app = FastAPI(
    title="TweetCraft API",
    description="""
    Turn raw ideas and transcripts into tweets that sound like you.

    ## Features

    * ✍️ Generate tweet drafts from an idea, matched to your own voice
    * 📈 Score every draft for viral potential (authenticity, engagement, quality)
    * 🎙️ Extract 3-5 tweetable insights from call and interview transcripts
    * 🗂️ Review drafts on a board: generated → in review → approved → published
    """,
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware (request id, timing, status for every request)
app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(scoring_router)
app.include_router(tweets_router)
app.include_router(transcripts_router)
app.include_router(training_router)
app.include_router(system_router)


@app.get("/health", tags=["system"])
async def health_check():
    """Simple liveness check."""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@app.on_event("startup")
async def startup_event():
    """Run startup tasks."""
    logging_service = get_logging_service()
    logging_service.log_system_event(
        'startup',
        f'Application starting - Deployment: {DEPLOYMENT_ID}',
        details={
            'python_version': sys.version,
            'port': os.getenv('PORT', 'not set'),
            'deployment_id': DEPLOYMENT_ID,
            'database_url': 'set' if os.getenv('DATABASE_URL') else 'NOT SET (sqlite)',
        }
    )

    print("🚀 Starting TweetCraft API...", flush=True)
    print(f"📍 Deployment: {DEPLOYMENT_ID}", flush=True)
    print("📝 Documentation available at: /docs", flush=True)
    print(f"🔑 {get_env_status().message}", flush=True)

    print("💾 Initializing database...", flush=True)
    try:
        init_db()
    except Exception as e:
        logging_service.log_error("Database init failed", exception=e)
        print(f"❌ Database init failed: {e}", flush=True)
        # Continue anyway - scoring endpoints work without a database


@app.on_event("shutdown")
async def shutdown_event():
    """Run shutdown tasks."""
    print("👋 Shutting down TweetCraft API...", flush=True)
    logging_service = get_logging_service()
    logging_service.log_system_event('shutdown', 'Application shutting down')
    logging_service.shutdown()
