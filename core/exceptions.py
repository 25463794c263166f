"""
自定義異常類別

集中管理所有比賽生命週期異常，方便 Scoreboard 層統一轉換成 MatchResult

分類：
- MatchNotFound：Store 裡沒有這場比賽
- InvalidStateTransition：目前狀態不允許這個操作
- MatchConflict：開賽會讓同一隊同時出現在兩場進行中的比賽
- InvalidMatchArgument：呼叫者提供的值不合法（負分、結束早於開始）
"""


class ScoreboardException(Exception):
    """所有記分板異常的基類"""
    pass


# ============ Match 相關異常 ============

class MatchNotFound(ScoreboardException):
    """比賽不存在"""
    def __init__(self, home_team, away_team):
        self.home_team = home_team
        self.away_team = away_team
        super().__init__(f"Match {home_team} vs {away_team} not found")


# ============ 狀態轉換異常 ============

class InvalidStateTransition(ScoreboardException):
    """非法的狀態轉換"""
    reason = "invalid state transition"

    def __init__(self, home_team, away_team):
        self.home_team = home_team
        self.away_team = away_team
        super().__init__(f"Match {home_team} vs {away_team}: {self.reason}")


class MatchAlreadyStarted(InvalidStateTransition):
    """比賽已經開始，不能重複開賽"""
    reason = "already started"


class MatchNotStarted(InvalidStateTransition):
    """比賽尚未開始"""
    reason = "not started"


class MatchAlreadyFinished(InvalidStateTransition):
    """比賽已經結束，不能再更新比分或再次結束"""
    reason = "already finished"


# ============ 衝突異常 ============

class MatchConflict(ScoreboardException):
    """開賽會違反「每隊同時只能有一場進行中比賽」"""
    pass


class TeamAlreadyPlaying(MatchConflict):
    """主隊或客隊已經在另一場進行中的比賽"""
    def __init__(self, team, side, active_match):
        self.team = team
        self.side = side
        self.active_match = active_match
        super().__init__(
            f"{side.capitalize()} team {team} already playing in "
            f"{active_match.home_team} vs {active_match.away_team}"
        )


# ============ 參數異常 ============

class InvalidMatchArgument(ScoreboardException):
    """呼叫者提供的比賽資料不合法"""
    pass


class NegativeScore(InvalidMatchArgument):
    """比分不能是負數"""
    def __init__(self, home_team, away_team, home_score, away_score):
        self.home_team = home_team
        self.away_team = away_team
        self.home_score = home_score
        self.away_score = away_score
        super().__init__(
            f"Negative score for {home_team} vs {away_team}: {home_score}-{away_score}"
        )


class FinishBeforeStart(InvalidMatchArgument):
    """結束時間早於開始時間"""
    def __init__(self, home_team, away_team, started_at, finished_at):
        self.home_team = home_team
        self.away_team = away_team
        self.started_at = started_at
        self.finished_at = finished_at
        super().__init__(
            f"Match {home_team} vs {away_team}: end {finished_at.isoformat()} "
            f"before start {started_at.isoformat()}"
        )
