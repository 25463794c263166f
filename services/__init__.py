"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換、不存取 Store：
- ConflictService：隊伍是否已在進行中的比賽
- ScoreService：比分與結束時間驗證
- SummaryService：記分板排名
"""
