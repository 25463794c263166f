"""
SqlMatchStore：以 SQLAlchemy table 實作的 Match Store

Session 策略：
- 一般呼叫：每次呼叫開一個 session，@transactional 負責 commit/rollback
- exclusive_access() 期間：整個臨界區共用一個 session，
  Store 內的寫入只 flush，離開時統一 commit（失敗則 rollback）
"""
from contextlib import contextmanager
from typing import Iterator, List, Optional
import logging
import threading

from sqlalchemy.orm import Session, Query

from database import OUTER_TRANSACTION, SessionLocal, transactional
from models import Match, MatchIdentity, MatchRecord
from core.exceptions import ScoreboardException
from core.locks import lock_all_matches, with_match_lock
from core.match_store import MatchStore

logger = logging.getLogger(__name__)


class SqlMatchStore(MatchStore):

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or SessionLocal
        # SQLite 會忽略 FOR UPDATE，所以 process 內仍需要一把鎖
        self._lock = threading.RLock()
        self._local = threading.local()

    # ============ Store 介面 ============

    def save(self, match: Match) -> Match:
        with self._session() as db:
            return self._save(db, match)

    def delete(self, match: Match) -> None:
        with self._session() as db:
            self._delete(db, match.identity)

    def delete_all(self) -> None:
        with self._session() as db:
            self._delete_all(db)

    def find_by_identity(self, match: Match) -> Optional[Match]:
        with self._session() as db:
            record = _query_match(match.identity, db).first()
            return record.to_match() if record else None

    def list_all(self) -> List[Match]:
        with self._session() as db:
            records = db.query(MatchRecord).order_by(MatchRecord.id).all()
            return [record.to_match() for record in records]

    @contextmanager
    def exclusive_access(self, identity: Optional[MatchIdentity] = None) -> Iterator["SqlMatchStore"]:
        with self._lock:
            if getattr(self._local, "db", None) is not None:
                # 同一執行緒重入，沿用外層 transaction
                yield self
                return

            db = self._session_factory()
            db.info[OUTER_TRANSACTION] = True
            self._local.db = db
            try:
                # 鎖住所有比賽列，開賽檢查與寫入在同一個 transaction 內
                lock_all_matches(db).all()
                yield self
                db.commit()
            except ScoreboardException:
                # 業務驗證失敗時還沒有任何寫入
                db.rollback()
                raise
            except Exception as e:
                logger.error(f"Exclusive access failed for {identity}: {e}", exc_info=True)
                db.rollback()
                raise
            finally:
                self._local.db = None
                db.close()

    # ============ 內部實作 ============

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock:
            db = getattr(self._local, "db", None)
            if db is not None:
                yield db
                return

            db = self._session_factory()
            try:
                yield db
            finally:
                db.close()

    @transactional
    def _save(self, db: Session, match: Match) -> Match:
        record = with_match_lock(match.identity, db).first()
        if record is None:
            record = MatchRecord(
                home_team=match.home_team.name,
                away_team=match.away_team.name
            )
            db.add(record)
        record.apply(match)
        db.flush()
        return record.to_match()

    @transactional
    def _delete(self, db: Session, identity: MatchIdentity) -> None:
        _query_match(identity, db).delete(synchronize_session=False)

    @transactional
    def _delete_all(self, db: Session) -> None:
        db.query(MatchRecord).delete(synchronize_session=False)


def _query_match(identity: MatchIdentity, db: Session) -> Query:
    return db.query(MatchRecord).filter(
        MatchRecord.home_team == identity.home,
        MatchRecord.away_team == identity.away
    )
