from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All booking tables inherit from this base class so Alembic autogenerate
    and integration-test fixtures see a single metadata collection.
    """

    pass
