import os
import sys
import uvicorn
import logging

# Configure logging to stdout until the app installs its own handler
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

logger.info("=" * 60)
logger.info("Clinic Queue Startup")
logger.info("=" * 60)
logger.info(f"Python version: {sys.version.split()[0]}")
logger.info(f"Source path: {src_path}")

# Log the environment that shapes queue behavior (no secrets)
for name, default in (
    ("PORT", "8000"),
    ("APP_ENV", "development"),
    ("MONGO_BACKEND", "memory"),
    ("QUEUE_TOKEN_SCOPE", "clinic"),
    ("LOG_FORMAT", "json"),
):
    logger.info(f"  {name}: {os.environ.get(name, default)}")
logger.info(f"  MONGO_URI: {'set' if os.environ.get('MONGO_URI') else 'not set'}")


if __name__ == "__main__":
    from clinicqueue.core.config import get_settings

    settings = get_settings()
    port = int(os.environ.get("PORT", settings.port))
    logger.info(f"Starting uvicorn on {settings.host}:{port}")
    uvicorn.run(
        "clinicqueue.app:app",
        host=settings.host,
        port=port,
        reload=settings.is_development and settings.debug,
        log_level=settings.logging.level.lower(),
    )
