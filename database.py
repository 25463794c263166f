from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from pydantic_settings import BaseSettings
from functools import lru_cache, wraps
from typing import Literal
import logging

logger = logging.getLogger(__name__)

# Session.info 上的旗標：表示目前 session 屬於外層的 exclusive access transaction
OUTER_TRANSACTION = "scoreboard_outer_transaction"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./scoreboard.db"
    scoreboard_store: Literal["memory", "sql"] = "memory"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()


def create_scoreboard_engine(database_url: str):
    """
    建立 SQLAlchemy Engine

    SQLite 需要特殊設定：connect_args={"check_same_thread": False}
    這允許多執行緒存取同一個 SQLite 連線（並發 start_game 的情境需要）
    """
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
        pool_pre_ping=True
    )


@lru_cache()
def get_session_factory(database_url: str) -> sessionmaker:
    """
    每個 database_url 只建立一次 Engine 和 sessionmaker

    預設設定的 URL 會拿到和 SessionLocal 同一個 factory
    """
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=create_scoreboard_engine(database_url)
    )


settings = get_settings()

SessionLocal = get_session_factory(settings.database_url)
engine = SessionLocal.kw["bind"]
Base = declarative_base()


def transactional(func):
    """
    Transaction decorator：確保資料庫操作的原子性

    使用方式：
        @transactional
        def _save(self, db: Session, match):
            # 所有 DB 操作都在一個 transaction 內
            db.add(record)
            # 不需要手動 commit，decorator 會處理

    如果函式內發生異常：
        - 自動 rollback
        - 異常會被重新拋出（讓上層處理）

    外層 transaction：
        - 如果 session 被標記為 OUTER_TRANSACTION（exclusive access 期間），
          只 flush 不 commit，由外層統一 commit/rollback

    注意：
        - 參數中必須有一個 db: Session（位置參數或 keyword）
        - 不要在函式內手動 commit（decorator 會處理）
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        # 找出 db session（可能在 args 或 kwargs）
        db = next((arg for arg in args if isinstance(arg, Session)), kwargs.get("db"))

        if db is None:
            raise ValueError(
                f"@transactional requires a 'db: Session' argument, "
                f"but got args={args}, kwargs={kwargs}"
            )

        if db.info.get(OUTER_TRANSACTION):
            result = func(*args, **kwargs)
            db.flush()
            return result

        try:
            result = func(*args, **kwargs)
            db.commit()
            return result
        except Exception as e:
            logger.error(f"Transaction failed in {func.__name__}: {e}", exc_info=True)
            db.rollback()
            raise

    return wrapper
