"""
Initialize the verification database tables
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session
from verifyhub.core.database import SessionLocal, check_connection, init_db
from verifyhub.core.logging_config import configure_logging
import structlog

logger = structlog.get_logger()


def main():
    """Main initialization function"""
    configure_logging()
    logger.info("initializing_database")

    db: Session = SessionLocal()
    try:
        if not check_connection(db):
            logger.error("database_unreachable")
            sys.exit(1)
    finally:
        db.close()

    init_db()
    logger.info("database_initialization_complete")


if __name__ == "__main__":
    main()
