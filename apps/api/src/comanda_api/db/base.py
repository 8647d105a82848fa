from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Matches the index names created by the alembic migrations.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for token store models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
