"""
並發控制工具

提供 Database-level 的鎖定機制，防止競態條件（Race Condition）

主要使用 PostgreSQL 的 SELECT ... FOR UPDATE 來實現悲觀鎖（Pessimistic Locking）
SQLite 不支援 FOR UPDATE（SQLAlchemy 編譯時會省略），
所以 SqlMatchStore 另外用 process 內的 RLock 序列化
"""
from sqlalchemy.orm import Session, Query

from models import MatchIdentity, MatchRecord


def with_match_lock(identity: MatchIdentity, db: Session) -> Query:
    """
    鎖定一場比賽（行級鎖）

    使用場景：
    - 更新比分、結束比賽時
    - 需要確保比賽在整個 transaction 期間不被其他請求修改

    範例：
        record = with_match_lock(match.identity, db).first()
        if not record:
            raise MatchNotFound(...)
        record.home_score = 2
        db.commit()

    參數：
        identity: (主隊, 客隊)
        db: SQLAlchemy Session

    返回：
        Query object（需要呼叫 .first() 或 .one() 來取得結果）

    注意：
        - nowait=False 表示如果鎖被佔用，會等待
        - 必須在 transaction 內使用（確保有 commit 或 rollback）
    """
    return db.query(MatchRecord).filter(
        MatchRecord.home_team == identity.home,
        MatchRecord.away_team == identity.away
    ).with_for_update(nowait=False)


def lock_all_matches(db: Session) -> Query:
    """
    鎖定所有比賽（用於開賽檢查）

    使用場景：
    - 開賽時需要掃描所有其他比賽，確認兩隊都沒有進行中的比賽
    - 檢查和寫入必須在同一個 transaction 內完成

    參數：
        db: SQLAlchemy Session

    返回：
        Query object（呼叫 .all() 取得所有結果）
    """
    return db.query(MatchRecord).order_by(MatchRecord.id).with_for_update(nowait=False)
