from __future__ import annotations

from analytics.aggregator import RankingEntry, ScoreRecord, learning_time, percentage, rank_students


def test_equal_averages_get_positional_ranks_in_first_appearance_order():
    records = [
        ScoreRecord(student_id=1, score=80, total_points=100, username="ana"),
        ScoreRecord(student_id=2, score=9, total_points=10, username="ben"),
        ScoreRecord(student_id=1, score=100, total_points=100, username="ana"),
    ]
    entries = rank_students(records)
    assert [(e.student_id, e.average_score, e.test_count, e.rank) for e in entries] == [
        (1, 90.0, 2, 1),
        (2, 90.0, 1, 2),
    ]


def test_highest_average_ranks_first():
    entries = rank_students(
        [
            ScoreRecord(1, 1, 4),
            ScoreRecord(2, 3, 4),
            ScoreRecord(3, 2, 4),
        ]
    )
    assert [e.student_id for e in entries] == [2, 3, 1]
    assert [e.rank for e in entries] == [1, 2, 3]


def test_zero_point_submission_counts_as_zero_percent():
    entries = rank_students([ScoreRecord(1, 0, 0), ScoreRecord(1, 5, 5)])
    assert entries == [RankingEntry(student_id=1, username="", average_score=50.0, test_count=2, rank=1)]


def test_no_records_no_entries():
    assert rank_students([]) == []


def test_percentage():
    assert percentage(1, 3) == 100 / 3
    assert percentage(0, 0) == 0.0


def test_learning_time_formatting():
    assert learning_time(3 * 3600 + 25 * 60 + 59) == {
        "total_seconds": 12359,
        "hours": 3,
        "minutes": 25,
        "formatted": "3h 25m",
    }
    assert learning_time(0)["formatted"] == "0h 0m"
