"""
Match Store：保存所有比賽紀錄

職責：
1. 以 identity（主隊, 客隊）保存、查詢、刪除比賽
2. 提供 exclusive_access()，讓 MatchManager 的「讀取 → 驗證 → 寫入」
   在同一個臨界區內完成

Store 擁有所有 Match 紀錄，呼叫者拿到的永遠是複本：
修改複本不會影響 Store，必須透過 save() 寫回。
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, List, Optional
import threading

from models import Match, MatchIdentity


class MatchStore(ABC):
    """Store 介面"""

    @abstractmethod
    def save(self, match: Match) -> Match:
        """依 identity upsert，返回寫入後的值"""

    @abstractmethod
    def delete(self, match: Match) -> None:
        pass

    @abstractmethod
    def delete_all(self) -> None:
        pass

    @abstractmethod
    def find_by_identity(self, match: Match) -> Optional[Match]:
        pass

    @abstractmethod
    def list_all(self) -> List[Match]:
        """返回所有比賽（順序不保證，但對同一份資料是固定的）"""

    @abstractmethod
    def exclusive_access(self, identity: Optional[MatchIdentity] = None):
        """
        Context manager：取得 Store 的獨占存取權

        開賽檢查會掃描所有比賽，所以鎖的範圍是整個 Store，
        identity 只用於 log 和未來的細粒度鎖。
        """


class InMemoryMatchStore(MatchStore):
    """
    以 dict 保存的 Store：MatchIdentity -> Match

    並發：
    - 單一 RLock 保護整個 dict
    - exclusive_access() 期間，同一執行緒內的 save/find/list_all 可以重入
    - list_all() 在鎖內複製，呼叫者看到的是一致的 snapshot
    """

    def __init__(self):
        self._matches: Dict[MatchIdentity, Match] = {}
        self._lock = threading.RLock()

    def save(self, match: Match) -> Match:
        with self._lock:
            self._matches[match.identity] = replace(match)
            return replace(match)

    def delete(self, match: Match) -> None:
        with self._lock:
            self._matches.pop(match.identity, None)

    def delete_all(self) -> None:
        with self._lock:
            self._matches.clear()

    def find_by_identity(self, match: Match) -> Optional[Match]:
        with self._lock:
            stored = self._matches.get(match.identity)
            return replace(stored) if stored is not None else None

    def list_all(self) -> List[Match]:
        with self._lock:
            return [replace(match) for match in self._matches.values()]

    @contextmanager
    def exclusive_access(self, identity: Optional[MatchIdentity] = None) -> Iterator["InMemoryMatchStore"]:
        with self._lock:
            yield self
