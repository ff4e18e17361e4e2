"""Schema creation and sample data for the pet store.

Runs once at startup, before the HTTP listener opens. The table is created if
missing and seeded with eight sample pets when empty, so a fresh database is
immediately demoable. Re-running against a populated table is a no-op.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import Base, Pet

logger = logging.getLogger(__name__)

SAMPLE_PETS = (
    {"race": "Golden Retriever", "gender": "Male", "name": "Max", "age": 5, "description": "Friendly and energetic dog"},
    {"race": "Persian Cat", "gender": "Female", "name": "Luna", "age": 3, "description": "Calm and fluffy cat"},
    {"race": "Labrador", "gender": "Male", "name": "Charlie", "age": 7, "description": "Loyal companion"},
    {"race": "Siamese Cat", "gender": "Female", "name": "Bella", "age": 2, "description": "Playful and vocal"},
    {"race": "German Shepherd", "gender": "Male", "name": "Rex", "age": 4, "description": "Smart and protective"},
    {"race": "Maine Coon", "gender": "Male", "name": "Oliver", "age": 6, "description": "Large and gentle cat"},
    {"race": "Parakeet", "gender": "Female", "name": "Kiwi", "age": 1, "description": "Colorful and chirpy bird"},
    {"race": "Cockatiel", "gender": "Male", "name": "Sunny", "age": 2, "description": "Friendly whistling bird"},
)


def init_database(engine) -> int:
    """Create the `pets` table and seed it when empty.

    Args:
        engine: SQLAlchemy engine for the resolved database.

    Returns:
        int: Number of pets inserted (0 if the table already had rows).

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database is unreachable or the
            DDL/inserts fail. Startup is expected to abort in that case.
    """
    logger.info("Initializing %s database...", engine.dialect.name)
    Base.metadata.create_all(engine)
    logger.info("Pets table ready")

    with Session(engine) as session:
        count = session.scalar(select(func.count()).select_from(Pet))
        if count:
            logger.info("Database already contains %d pets", count)
            return 0

        logger.info("Seeding sample pet data...")
        session.add_all(Pet(**pet) for pet in SAMPLE_PETS)
        session.commit()

    logger.info("Inserted %d sample pets", len(SAMPLE_PETS))
    return len(SAMPLE_PETS)
