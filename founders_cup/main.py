"""
FastAPI main application
Weekly tournament registration server

Modular architecture with separated API routers in founders_cup/api/:
- health.py: Health check and current slot count
- config.py: Tournament details (fees, prizes, schedule)
- registration.py: Registration status and team sign-up
- team.py: Public roster and UTR lookup
- winners.py: Winner and balance history
- admin.py: Full roster, archives, winner processing

All routers access shared state via founders_cup.state module.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from founders_cup import state
from founders_cup.config import load_config

# Import all API routers
from founders_cup.api import health, admin, registration, team, winners
from founders_cup.api import config as config_router


# Setup logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup: load settings and build the store and adapters
    try:
        settings = load_config()
        state.configure(settings)
        state.STORE.ensure_directories()
        logger.info(
            f"✅ Server started | data dir: {settings.data_dir} | timezone: {settings.timezone}"
        )
    except Exception as e:
        logger.error(f"❌ Failed to load configuration: {e}")
        raise

    if not state.MAILER.is_configured:
        logger.warning("Email is not configured; registration emails will be skipped")
    if not state.VERIFIER.url:
        logger.warning("Payment verifier URL is not configured; registrations will be rejected")

    yield

    # Shutdown
    logger.info("🛑 Server shutting down")


# Create FastAPI app
app = FastAPI(
    title="Weekly Tournament Registration",
    description="Team registration with AI payment verification and weekly archives",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== INCLUDE ROUTERS ====================

# Health check (GET /)
app.include_router(health.router)

# Tournament details (GET /config)
app.include_router(config_router.router)

# Registration (GET /registration/status, POST /registration)
app.include_router(registration.router)

# Public roster (GET /teams, GET /teams/lookup)
app.include_router(team.router)

# Winner history (GET /winners, GET /winners/balance)
app.include_router(winners.router)

# Admin (GET /admin/teams, GET /admin/archives, POST /admin/winners)
app.include_router(admin.router)


# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
