from datetime import datetime, timedelta, timezone

from models import Match
from services.summary_service import rank_matches, started_matches


KICKOFF = datetime(2026, 6, 11, 18, 0, tzinfo=timezone.utc)


def _started(home, away, home_score, away_score, minutes):
    return Match.between(
        home, away,
        home_score=home_score,
        away_score=away_score,
        started_at=KICKOFF + timedelta(minutes=minutes),
    )


def _names(matches):
    return [(m.home_team.name, m.away_team.name) for m in matches]


def test_rank_matches_by_total_then_most_recent_start():
    matches = [
        _started("Mexico", "Canada", 0, 5, 0),
        _started("Spain", "Brazil", 10, 2, 1),
        _started("Germany", "France", 2, 2, 2),
        _started("Uruguay", "Italy", 6, 6, 3),
        _started("Argentina", "Australia", 3, 1, 4),
    ]

    assert _names(rank_matches(matches)) == [
        ("Uruguay", "Italy"),
        ("Spain", "Brazil"),
        ("Mexico", "Canada"),
        ("Argentina", "Australia"),
        ("Germany", "France"),
    ]


def test_rank_matches_excludes_unstarted():
    matches = [
        Match.between("Mexico", "Canada", home_score=9),
        _started("Spain", "Brazil", 0, 0, 0),
    ]

    assert _names(rank_matches(matches)) == [("Spain", "Brazil")]
    assert _names(started_matches(matches)) == [("Spain", "Brazil")]


def test_rank_matches_keeps_input_order_on_full_tie():
    first = _started("Mexico", "Canada", 1, 1, 0)
    second = _started("Spain", "Brazil", 2, 0, 0)

    assert _names(rank_matches([first, second])) == [("Mexico", "Canada"), ("Spain", "Brazil")]
    assert _names(rank_matches([second, first])) == [("Spain", "Brazil"), ("Mexico", "Canada")]


def test_rank_matches_includes_finished():
    finished = _started("Mexico", "Canada", 0, 5, 0)
    finished.finished_at = KICKOFF + timedelta(minutes=90)

    assert rank_matches([finished]) == [finished]


# ============ get_summary through the manager ============

def test_summary_scenario(manager, register):
    pairs = [("Mexico", "Canada"), ("Spain", "Brazil"), ("Germany", "France"),
             ("Uruguay", "Italy"), ("Argentina", "Australia")]
    scores = [(0, 5), (10, 2), (2, 2), (6, 6), (3, 1)]
    register(*pairs)

    for (home, away), (home_score, away_score) in zip(pairs, scores):
        manager.start_game(Match.between(home, away))
        manager.update_score(Match.between(home, away, home_score=home_score, away_score=away_score))

    summary = manager.get_summary()

    assert [str(m) for m in summary] == [
        "Uruguay 6 - 6 Italy",
        "Spain 10 - 2 Brazil",
        "Mexico 0 - 5 Canada",
        "Argentina 3 - 1 Australia",
        "Germany 2 - 2 France",
    ]


def test_equal_totals_rank_latest_start_first(manager, register):
    register(("Spain", "Brazil"), ("Germany", "France"), ("Mexico", "Canada"))
    for home, away in [("Spain", "Brazil"), ("Germany", "France"), ("Mexico", "Canada")]:
        manager.start_game(Match.between(home, away))
        manager.update_score(Match.between(home, away, home_score=3, away_score=0))

    assert _names(manager.get_summary()) == [
        ("Mexico", "Canada"),
        ("Germany", "France"),
        ("Spain", "Brazil"),
    ]


def test_summary_reflects_latest_update(manager, register):
    register(("Mexico", "Canada"))
    manager.start_game(Match.between("Mexico", "Canada"))

    manager.update_score(Match.between("Mexico", "Canada", home_score=2, away_score=3))
    assert manager.get_summary()[0].total_score == 5

    manager.update_score(Match.between("Mexico", "Canada", home_score=2, away_score=4))
    assert manager.get_summary()[0].total_score == 6

    manager.finish_game(Match.between("Mexico", "Canada", home_score=3, away_score=4))
    summary = manager.get_summary()
    assert summary[0].total_score == 7
    assert summary[0].is_finished


def test_summary_never_includes_unstarted(manager, register):
    register(("Mexico", "Canada"), ("Spain", "Brazil"))
    manager.start_game(Match.between("Spain", "Brazil"))

    assert _names(manager.get_summary()) == [("Spain", "Brazil")]


def test_summary_is_empty_without_started_matches(manager, register):
    register(("Mexico", "Canada"))

    assert manager.get_summary() == []


def test_summary_is_idempotent(manager, register):
    register(("Mexico", "Canada"), ("Spain", "Brazil"), ("Germany", "France"))
    for home, away in [("Mexico", "Canada"), ("Spain", "Brazil"), ("Germany", "France")]:
        manager.start_game(Match.between(home, away))
    manager.update_score(Match.between("Germany", "France", home_score=1))

    first = manager.get_summary()
    second = manager.get_summary()

    assert [(str(m), m.started_at) for m in first] == [(str(m), m.started_at) for m in second]
