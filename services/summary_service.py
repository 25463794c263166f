"""
排名服務：產生記分板摘要的排序

排序規則：
1. 總進球數（主隊 + 客隊）由多到少
2. 總進球數相同時，越晚開賽的越前面
3. 仍然相同時，保持 Store 列出的順序（stable sort）
"""
from typing import Iterable, List

from models import Match


def started_matches(matches: Iterable[Match]) -> List[Match]:
    """只保留已開賽的比賽（包含已結束的）"""
    return [match for match in matches if match.is_started]


def rank_matches(matches: Iterable[Match]) -> List[Match]:
    """
    排序已開賽的比賽

    範例：
        Mexico 0 - 5 Canada      （總分 5）
        Spain 10 - 2 Brazil      （總分 12）
        Germany 2 - 2 France     （總分 4）
        Uruguay 6 - 6 Italy      （總分 12，比 Spain 晚開賽）

        -> Uruguay-Italy, Spain-Brazil, Mexico-Canada, Germany-France
    """
    # reverse=True 仍然是 stable sort，相同 key 保持原順序
    return sorted(
        started_matches(matches),
        key=lambda match: (match.total_score, match.started_at),
        reverse=True
    )
