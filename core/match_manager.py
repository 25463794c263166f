"""
Match Manager：管理比賽的完整生命週期

職責：
1. 開賽（狀態轉換 + 兩隊衝突檢查）
2. 更新比分
3. 結束比賽
4. 產生記分板摘要

原則：
- 單一職責：只管生命週期，不管比賽怎麼被建立或保存
- 消除特殊情況：所有狀態變更經過 MatchStateMachine
- 資料結構優先：先完成所有驗證，最後才做唯一一次寫入
"""
from datetime import datetime, timezone
from typing import Callable, List, Optional
import logging

from models import Match
from core.exceptions import MatchNotFound, TeamAlreadyPlaying
from core.match_store import MatchStore
from core.state_machine import MatchEvent, MatchStateMachine
from services.conflict_service import find_active_match_for, other_matches
from services.score_service import validate_finish_time, validate_scores
from services.summary_service import rank_matches

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MatchManager:
    """比賽生命週期管理器"""

    def __init__(self, store: MatchStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utc_now

    def start_game(self, candidate: Match) -> Match:
        """
        開賽（狀態轉換 SCHEDULED -> IN_PROGRESS）

        前置條件（依序檢查，第一個失敗的為準）：
        1. 比賽必須已經在 Store 裡
        2. 比賽尚未開始
        3. 主隊沒有其他進行中的比賽
        4. 客隊沒有其他進行中的比賽

        流程：
        1. 取得 Store 的獨占存取權
        2. 驗證前置條件
        3. 設定開賽時間、比分歸零
        4. 寫回 Store

        參數：
            candidate: 要開賽的比賽（只用到 identity）

        返回：
            寫入後的比賽

        異常：
            MatchNotFound: 比賽不存在
            MatchAlreadyStarted: 比賽已經開始
            TeamAlreadyPlaying: 主隊或客隊已經在另一場進行中的比賽
        """
        with self.store.exclusive_access(candidate.identity):
            # 1. 找到比賽
            match = self._get_stored(candidate)

            # 2. 狀態檢查
            MatchStateMachine.ensure_can_apply(match, MatchEvent.START)

            # 3. 兩隊衝突檢查（主隊先報）
            others = other_matches(match, self.store.list_all())
            for side, team in (("home", candidate.home_team), ("away", candidate.away_team)):
                active = find_active_match_for(team, others)
                if active is not None:
                    logger.warning(
                        f"Refused to start {match.home_team} vs {match.away_team}: "
                        f"{side} team {team} already playing"
                    )
                    raise TeamAlreadyPlaying(team, side, active)

            # 4. 開賽
            match.started_at = self.clock()
            match.home_score = 0
            match.away_score = 0
            saved = self.store.save(match)

        logger.info(f"Started match {saved.home_team} vs {saved.away_team}")
        return saved

    def finish_game(self, candidate: Match) -> Match:
        """
        結束比賽（狀態轉換 IN_PROGRESS -> FINISHED）

        前置條件：
        1. 比賽必須存在
        2. 比賽已經開始
        3. 比賽尚未結束
        4. candidate.finished_at 不早於開賽時間
        5. 比分不能是負數

        注意：
            - 寫入的結束時間一律是目前時間，
              candidate.finished_at 只用於第 4 點的順序檢查
            - 結束後紀錄仍留在 Store，摘要仍會列出

        異常：
            MatchNotFound, MatchNotStarted, MatchAlreadyFinished,
            FinishBeforeStart, NegativeScore
        """
        with self.store.exclusive_access(candidate.identity):
            match = self._get_stored(candidate)
            MatchStateMachine.ensure_can_apply(match, MatchEvent.FINISH)
            validate_finish_time(candidate, match.started_at)
            validate_scores(candidate)

            match.finished_at = self.clock()
            match.home_score = candidate.home_score
            match.away_score = candidate.away_score
            saved = self.store.save(match)

        logger.info(f"Finished match {saved}")
        return saved

    def update_score(self, candidate: Match) -> Match:
        """
        更新比分（IN_PROGRESS -> IN_PROGRESS）

        比分可以增加也可以減少（例如 VAR 取消進球），不檢查單調性

        異常：
            MatchNotFound, MatchNotStarted, MatchAlreadyFinished, NegativeScore
        """
        with self.store.exclusive_access(candidate.identity):
            match = self._get_stored(candidate)
            MatchStateMachine.ensure_can_apply(match, MatchEvent.UPDATE_SCORE)
            validate_scores(candidate)

            match.home_score = candidate.home_score
            match.away_score = candidate.away_score
            saved = self.store.save(match)

        logger.info(f"Updated score {saved}")
        return saved

    def get_summary(self) -> List[Match]:
        """
        記分板摘要：所有已開賽的比賽（包含已結束），依總分、開賽時間排序
        """
        return rank_matches(self.store.list_all())

    def _get_stored(self, candidate: Match) -> Match:
        match = self.store.find_by_identity(candidate)
        if match is None:
            raise MatchNotFound(candidate.home_team, candidate.away_team)
        return match
