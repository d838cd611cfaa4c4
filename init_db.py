"""
Database initialization script
Creates the users, events and event_tags tables for the configured DATABASE_URL
"""
import logging

from crowdfund.core.config import load_settings
from crowdfund.database import build_engine, init_db as create_tables

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init_db():
    """Initialize database with all tables"""
    settings = load_settings()
    engine = build_engine(settings)
    try:
        logger.info("Creating all database tables...")
        create_tables(engine)
        logger.info("✓ Database tables created successfully!")
        logger.info("You can now start the FastAPI server.")
    except Exception as e:
        logger.error(f"✗ Error initializing database: {str(e)}")
        raise
    finally:
        engine.dispose()


if __name__ == "__main__":
    init_db()
