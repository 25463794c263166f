"""
Scoreboard：記分板對外介面

職責：
1. 提供 start_game / finish_game / update_score / get_summary 四個操作
2. 把 MatchManager 的業務異常轉換成 MatchResult，呼叫端明確處理每種失敗
3. 依 Settings 組裝 Store 和 Manager
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional
import logging

from database import Base, Settings, get_session_factory, get_settings
from models import Match
from core.exceptions import (
    InvalidMatchArgument,
    InvalidStateTransition,
    MatchConflict,
    MatchNotFound,
    ScoreboardException,
)
from core.match_manager import MatchManager
from core.match_store import InMemoryMatchStore, MatchStore
from core.sql_match_store import SqlMatchStore

logger = logging.getLogger(__name__)


class ResultKind(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    CONFLICT = "conflict"
    INVALID_ARGUMENT = "invalid_argument"


# 異常 -> 結果種類（依序比對，子類別會被父類別涵蓋）
_ERROR_KINDS = (
    (MatchNotFound, ResultKind.NOT_FOUND),
    (InvalidStateTransition, ResultKind.INVALID_TRANSITION),
    (MatchConflict, ResultKind.CONFLICT),
    (InvalidMatchArgument, ResultKind.INVALID_ARGUMENT),
)


@dataclass(frozen=True)
class MatchResult:
    kind: ResultKind
    match: Optional[Match] = None
    error: Optional[ScoreboardException] = None

    @property
    def ok(self) -> bool:
        return self.kind == ResultKind.SUCCESS

    @property
    def message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    def unwrap(self) -> Match:
        """返回比賽，失敗時重新拋出原本的異常"""
        if self.error is not None:
            raise self.error
        return self.match

    @classmethod
    def success(cls, match: Match) -> "MatchResult":
        return cls(kind=ResultKind.SUCCESS, match=match)

    @classmethod
    def failure(cls, error: ScoreboardException) -> "MatchResult":
        for error_type, kind in _ERROR_KINDS:
            if isinstance(error, error_type):
                return cls(kind=kind, error=error)
        raise error


class Scoreboard:
    """記分板"""

    def __init__(self, store: MatchStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.manager = MatchManager(store, clock=clock)

    def start_game(self, match: Match) -> MatchResult:
        return self._run(self.manager.start_game, match)

    def finish_game(self, match: Match) -> MatchResult:
        return self._run(self.manager.finish_game, match)

    def update_score(self, match: Match) -> MatchResult:
        return self._run(self.manager.update_score, match)

    def get_summary(self) -> List[Match]:
        return self.manager.get_summary()

    def _run(self, operation: Callable[[Match], Match], match: Match) -> MatchResult:
        try:
            return MatchResult.success(operation(match))
        except ScoreboardException as e:
            logger.info(f"{operation.__name__} rejected: {e}")
            return MatchResult.failure(e)


def create_store(settings: Settings) -> MatchStore:
    """
    依設定建立 Store

    - memory: InMemoryMatchStore
    - sql: SqlMatchStore（會建立 table）

    scoreboard_store 的合法值由 Settings 驗證
    """
    if settings.scoreboard_store == "memory":
        return InMemoryMatchStore()

    session_factory = get_session_factory(settings.database_url)
    Base.metadata.create_all(bind=session_factory.kw["bind"])
    return SqlMatchStore(session_factory)


def create_scoreboard(settings: Optional[Settings] = None, clock=None) -> Scoreboard:
    settings = settings or get_settings()
    store = create_store(settings)
    logger.info(f"Created scoreboard with {settings.scoreboard_store} store")
    return Scoreboard(store, clock=clock)
