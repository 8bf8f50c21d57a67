import logging
from app.db import base
from app.db.session import engine

logger = logging.getLogger(__name__)

def init_db() -> None:
    base.Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
