"""Portal auth: durable token storage."""

import logging
from datetime import datetime, timezone
from typing import Dict

from sqlalchemy import Column, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from . import config
from .exceptions import TokenStoreError

logger = logging.getLogger(__name__)

Base = declarative_base()


class DBSetting(Base):
    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(String, default=lambda: datetime.now(timezone.utc).isoformat())


class TokenStore:
    """get / set / clear for the one persisted bearer token."""

    def get(self) -> str:
        raise NotImplementedError

    def set(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class SqlTokenStore(TokenStore):
    """Keeps the token in a sqlite key-value table so it survives restarts."""

    def __init__(self, database_url: str = config.DATABASE_URL, key: str = config.TOKEN_STORE_KEY):
        self.key = key
        self.engine = create_engine(database_url, connect_args={"check_same_thread": False})
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def get(self) -> str:
        db = self.SessionLocal()
        try:
            row = db.get(DBSetting, self.key)
            return row.value if row else ""
        finally:
            db.close()

    def set(self, token: str) -> None:
        db = self.SessionLocal()
        try:
            db.merge(DBSetting(
                key=self.key,
                value=token,
                updated_at=datetime.now(timezone.utc).isoformat(),
            ))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise TokenStoreError(f"Could not save token: {str(e)}") from e
        finally:
            db.close()
        logger.info("Stored token under key %r", self.key)

    def clear(self) -> None:
        db = self.SessionLocal()
        try:
            db.query(DBSetting).filter(DBSetting.key == self.key).delete()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise TokenStoreError(f"Could not clear token: {str(e)}") from e
        finally:
            db.close()
        logger.info("Cleared token under key %r", self.key)


class MemoryTokenStore(TokenStore):
    def __init__(self, token: str = ""):
        self._data: Dict[str, str] = {}
        if token:
            self._data[config.TOKEN_STORE_KEY] = token

    def get(self) -> str:
        return self._data.get(config.TOKEN_STORE_KEY, "")

    def set(self, token: str) -> None:
        self._data[config.TOKEN_STORE_KEY] = token

    def clear(self) -> None:
        self._data.pop(config.TOKEN_STORE_KEY, None)
