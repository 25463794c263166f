"""
比賽狀態機：集中管理比賽的所有狀態轉換

狀態（由時間戳記推導）：
    SCHEDULED ──start──> IN_PROGRESS ──finish──> FINISHED
                              │
                              └──update_score──> IN_PROGRESS

規則：
- 只有 SCHEDULED 可以開賽
- 只有 IN_PROGRESS 可以更新比分、結束比賽
- FINISHED 是終點，沒有任何轉換
"""
from enum import Enum

from models import Match, MatchStatus
from core.exceptions import (
    MatchAlreadyFinished,
    MatchAlreadyStarted,
    MatchNotStarted,
)


class MatchEvent(str, Enum):
    START = "start"
    UPDATE_SCORE = "update_score"
    FINISH = "finish"


class MatchStateMachine:
    """比賽狀態機"""

    VALID_TRANSITIONS = {
        MatchStatus.SCHEDULED: {MatchEvent.START: MatchStatus.IN_PROGRESS},
        MatchStatus.IN_PROGRESS: {
            MatchEvent.UPDATE_SCORE: MatchStatus.IN_PROGRESS,
            MatchEvent.FINISH: MatchStatus.FINISHED,
        },
        MatchStatus.FINISHED: {},
    }

    @classmethod
    def can_apply(cls, status: MatchStatus, event: MatchEvent) -> bool:
        return event in cls.VALID_TRANSITIONS[status]

    @classmethod
    def ensure_can_apply(cls, match: Match, event: MatchEvent) -> MatchStatus:
        """
        確認事件可以套用在比賽目前的狀態上

        參數：
            match: Store 裡的比賽
            event: 要套用的事件

        返回：
            轉換後的狀態

        異常：
            MatchAlreadyStarted: 對已開始的比賽開賽
            MatchNotStarted: 對尚未開始的比賽更新比分或結束
            MatchAlreadyFinished: 對已結束的比賽更新比分或結束
        """
        status = match.status
        if cls.can_apply(status, event):
            return cls.VALID_TRANSITIONS[status][event]

        if event == MatchEvent.START:
            raise MatchAlreadyStarted(match.home_team, match.away_team)
        if status == MatchStatus.SCHEDULED:
            raise MatchNotStarted(match.home_team, match.away_team)
        raise MatchAlreadyFinished(match.home_team, match.away_team)
