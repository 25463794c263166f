"""
衝突檢查服務：確認隊伍是否已經在進行中的比賽

純計算邏輯，不存取 Store（由 MatchManager 傳入比賽清單）
"""
from typing import Iterable, List, Optional

from models import Match, Team


def other_matches(match: Match, matches: Iterable[Match]) -> List[Match]:
    """
    排除同一場比賽（依 identity），返回其他比賽
    """
    return [other for other in matches if other.identity != match.identity]


def find_active_match_for(team: Team, matches: Iterable[Match]) -> Optional[Match]:
    """
    找出隊伍正在進行的比賽

    規則：
    - 只看進行中（已開始且未結束）的比賽
    - 主隊或客隊都算

    參數：
        team: 要檢查的隊伍
        matches: 要掃描的比賽（通常已排除目前這場）

    返回：
        第一場符合的比賽，沒有則返回 None

    範例：
        Mexico vs Canada 進行中
        find_active_match_for(Team("Canada"), [...]) -> Mexico vs Canada
        find_active_match_for(Team("Spain"), [...]) -> None
    """
    for match in matches:
        if match.is_active and match.involves(team):
            return match
    return None
