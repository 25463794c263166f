"""
資料模型

- Team / Match：領域物件（純 Python dataclass），Store 之間傳遞的都是這些值
- MatchStatus：由時間戳記推導的比賽狀態
- MatchRecord：SqlMatchStore 使用的 SQLAlchemy table
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import NamedTuple, Optional

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from database import Base


class MatchStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class Team:
    """參賽隊伍（通常是國家名稱），以名稱判斷相等"""
    name: str

    def __str__(self):
        return self.name


class MatchIdentity(NamedTuple):
    """比賽的身分：(主隊, 客隊)，有順序之分"""
    home: str
    away: str


@dataclass(eq=False)
class Match:
    """
    一場比賽

    相等性：
        只比較主隊與客隊（identity），忽略比分和時間戳記。
        這樣帶著過期比分的 Match 仍然可以解析成 Store 裡的同一場比賽。
    """
    home_team: Team
    away_team: Team
    home_score: int = 0
    away_score: int = 0
    started_at: Optional[datetime] = field(default=None)
    finished_at: Optional[datetime] = field(default=None)

    @classmethod
    def between(cls, home: str, away: str, **kwargs) -> "Match":
        return cls(home_team=Team(home), away_team=Team(away), **kwargs)

    @property
    def identity(self) -> MatchIdentity:
        return MatchIdentity(self.home_team.name, self.away_team.name)

    @property
    def is_started(self) -> bool:
        return self.started_at is not None

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    @property
    def is_active(self) -> bool:
        return self.is_started and not self.is_finished

    @property
    def status(self) -> MatchStatus:
        if not self.is_started:
            return MatchStatus.SCHEDULED
        if self.is_finished:
            return MatchStatus.FINISHED
        return MatchStatus.IN_PROGRESS

    @property
    def total_score(self) -> int:
        return self.home_score + self.away_score

    def involves(self, team: Team) -> bool:
        return team in (self.home_team, self.away_team)

    def __eq__(self, other):
        if not isinstance(other, Match):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self):
        return hash(self.identity)

    def __str__(self):
        return f"{self.home_team} {self.home_score} - {self.away_score} {self.away_team}"


class MatchRecord(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("home_team", "away_team", name="uq_matches_home_away"),
    )

    id = Column(Integer, primary_key=True, index=True)
    home_team = Column(String, nullable=False)
    away_team = Column(String, nullable=False)
    home_score = Column(Integer, nullable=False, default=0)
    away_score = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime(timezone=True), nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    def to_match(self) -> Match:
        return Match(
            home_team=Team(self.home_team),
            away_team=Team(self.away_team),
            home_score=self.home_score,
            away_score=self.away_score,
            started_at=as_utc(self.started_at),
            finished_at=as_utc(self.finished_at),
        )

    def apply(self, match: Match) -> None:
        self.home_score = match.home_score
        self.away_score = match.away_score
        self.started_at = match.started_at
        self.finished_at = match.finished_at


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite 讀回來的 datetime、呼叫者傳入的 naive datetime 都視為 UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
