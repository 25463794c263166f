"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- 狀態機：集中管理比賽的狀態轉換
- Manager：管理比賽的生命週期（開賽、更新比分、結束、摘要）
- Store：保存比賽紀錄（記憶體 / SQLAlchemy）
- Locks：並發控制工具
"""
