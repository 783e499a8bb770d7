# File: academy/db/base_class.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for every SQLAlchemy model.
    Used by ``Base.metadata.create_all`` at startup.
    """
