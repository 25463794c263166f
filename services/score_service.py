"""
比分服務：驗證呼叫者提供的比分與結束時間
"""
from datetime import datetime
from typing import Optional

from models import Match, as_utc
from core.exceptions import FinishBeforeStart, NegativeScore


def validate_scores(candidate: Match) -> None:
    """
    比分不能是負數

    異常：
        NegativeScore: 主隊或客隊比分小於 0
    """
    if candidate.home_score < 0 or candidate.away_score < 0:
        raise NegativeScore(
            candidate.home_team,
            candidate.away_team,
            candidate.home_score,
            candidate.away_score
        )


def validate_finish_time(candidate: Match, started_at: datetime) -> None:
    """
    結束時間不能早於開始時間

    candidate.finished_at 為 None 時不檢查（由 MatchManager 蓋上目前時間）
    不帶 tzinfo 的時間一律視為 UTC
    """
    finished_at: Optional[datetime] = as_utc(candidate.finished_at)
    started_at = as_utc(started_at)
    if finished_at is not None and finished_at < started_at:
        raise FinishBeforeStart(candidate.home_team, candidate.away_team, started_at, finished_at)
