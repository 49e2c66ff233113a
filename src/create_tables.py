import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.extensions import db
from src.logger import get_logger

logger = get_logger("CreateTables")


def create_tables(drop_existing=False):
    if drop_existing:
        db.drop_all()
    db.create_all()
    logger.info("All tables created successfully")


if __name__ == "__main__":
    from src.main import create_app
    app = create_app()
    with app.app_context():
        create_tables(drop_existing="--drop" in sys.argv)
