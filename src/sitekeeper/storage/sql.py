"""
SiteKeeper SQL Option Store
KeyStore adapter persisting named values in the ``options`` table.
"""

import copy
from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.attributes import flag_modified

from sitekeeper.core.config import settings
from sitekeeper.core.logging import LoggerMixin
from sitekeeper.storage.base import KeyStoreError
from sitekeeper.storage.models import Base, Option


class SqlOptionStore(LoggerMixin):
    """
    KeyStore over a relational ``options`` table.

    Each ``set`` is a single transaction that replaces the stored value.
    """

    def __init__(self, url: Optional[str] = None, *, engine: Optional[Engine] = None):
        if engine is None:
            engine = create_engine(
                url or settings.DATABASE_URL,
                echo=settings.DATABASE_ECHO,
            )
        self.engine = engine
        Base.metadata.create_all(self.engine)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get(self, name: str, default: Any = None) -> Any:
        try:
            with self._session_factory() as session:
                option = session.get(Option, name)
                if option is None:
                    return default
                return copy.deepcopy(option.value)
        except SQLAlchemyError as e:
            raise KeyStoreError(f"Failed to read option '{name}': {e}") from e

    def set(self, name: str, value: Any) -> bool:
        try:
            with self._session_factory.begin() as session:
                option = session.get(Option, name, with_for_update=True)
                if option is None:
                    session.add(Option(name=name, value=copy.deepcopy(value)))
                else:
                    option.value = copy.deepcopy(value)
                    flag_modified(option, "value")
            return True
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to write option '{name}': {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
