"""Create the default instructor account.

Usage:
    python -m backend.seed
"""
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.database import create_db_engine, create_session_factory, init_db
from backend.models.user import Role
from backend.services.users import ensure_user

logger = logging.getLogger(__name__)


def seed_instructor(session_factory) -> bool:
    db = session_factory()
    try:
        user, created = ensure_user(
            db,
            email=config.SEED_INSTRUCTOR_EMAIL,
            password=config.SEED_INSTRUCTOR_PASSWORD,
            role=Role.AUSBILDER,
            name=config.SEED_INSTRUCTOR_NAME,
        )
    finally:
        db.close()

    if created:
        logger.info('Seeded instructor account %s', user.email)
    else:
        logger.info('Instructor account %s already exists', user.email)
    return created


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format='%(levelname)s %(name)s: %(message)s')
    engine = create_db_engine(config.DATABASE_URL)
    try:
        init_db(engine)
        seed_instructor(create_session_factory(engine))
    except SQLAlchemyError:
        logger.exception('Seeding failed. Check DATABASE_URL.')
        sys.exit(1)
    finally:
        engine.dispose()


if __name__ == '__main__':
    main()
