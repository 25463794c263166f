from concurrent.futures import ThreadPoolExecutor
import threading

from models import Match
from scoreboard import ResultKind

OPPONENTS = ["Canada", "Spain", "Brazil", "Germany", "France", "Italy", "Uruguay", "Japan"]


def _start_all(scoreboard, matches):
    barrier = threading.Barrier(len(matches))

    def start(match):
        barrier.wait()
        return scoreboard.start_game(match)

    with ThreadPoolExecutor(max_workers=len(matches)) as pool:
        return list(pool.map(start, matches))


def test_only_one_concurrent_start_succeeds_for_shared_team(scoreboard, register):
    register(*[("Mexico", opponent) for opponent in OPPONENTS])
    matches = [Match.between("Mexico", opponent) for opponent in OPPONENTS]

    results = _start_all(scoreboard, matches)

    assert sum(result.ok for result in results) == 1
    assert {result.kind for result in results if not result.ok} == {ResultKind.CONFLICT}
    assert len(scoreboard.get_summary()) == 1


def test_concurrent_start_of_same_match_succeeds_once(scoreboard, register):
    register(("Mexico", "Canada"))
    matches = [Match.between("Mexico", "Canada") for _ in range(6)]

    results = _start_all(scoreboard, matches)

    assert sum(result.ok for result in results) == 1
    assert {result.kind for result in results if not result.ok} == {ResultKind.INVALID_TRANSITION}


def test_concurrent_disjoint_starts_all_succeed(scoreboard, register):
    pairs = [("Mexico", "Canada"), ("Spain", "Brazil"), ("Germany", "France"), ("Italy", "Uruguay")]
    register(*pairs)

    results = _start_all(scoreboard, [Match.between(home, away) for home, away in pairs])

    assert all(result.ok for result in results)
    assert len(scoreboard.get_summary()) == len(pairs)
