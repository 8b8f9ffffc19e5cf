from datetime import datetime
from types import SimpleNamespace

import pytest

from analytics import compute_analytics
from errors import NotFoundError


def allocation(a, b, c, d):
    return {"A": a, "B": b, "C": c, "D": d}


def submission(submitted_at, responses, company_name="Acme"):
    return SimpleNamespace(
        company_name=company_name,
        submitted_at=submitted_at,
        question_responses=[
            SimpleNamespace(
                question_id=question_id,
                question_title=title,
                current_state=current,
                aspirational_state=aspirational,
            )
            for question_id, title, current, aspirational in responses
        ],
    )


def test_two_respondents_average_to_fifty_fifty():
    newest = submission(datetime(2025, 3, 2), [
        (1, "Dominant Characteristics", allocation(100, 0, 0, 0), allocation(40, 30, 20, 10)),
    ])
    oldest = submission(datetime(2025, 3, 1), [
        (1, "Dominant Characteristics", allocation(0, 100, 0, 0), allocation(20, 30, 40, 10)),
    ])

    analytics = compute_analytics([newest, oldest])

    assert analytics.company_name == "Acme"
    assert analytics.total_responses == 2
    assert analytics.date_range.last_response == datetime(2025, 3, 2)
    assert analytics.date_range.first_response == datetime(2025, 3, 1)
    averages = analytics.question_analytics[1].averages
    assert averages.current.model_dump() == allocation(50, 50, 0, 0)
    assert averages.aspirational.model_dump() == allocation(30, 30, 30, 10)


def test_empty_input_is_not_found():
    with pytest.raises(NotFoundError):
        compute_analytics([])


def test_half_values_round_up():
    subs = [
        submission(datetime(2025, 1, 2), [(1, "Q1", allocation(1, 99, 0, 0), allocation(3, 97, 0, 0))]),
        submission(datetime(2025, 1, 1), [(1, "Q1", allocation(2, 98, 0, 0), allocation(4, 96, 0, 0))]),
    ]
    averages = compute_analytics(subs).question_analytics[1].averages
    # 1.5 -> 2 e 98.5 -> 99 (round() do Python daria 2 e 98)
    assert averages.current.A == 2
    assert averages.current.B == 99
    # 3.5 -> 4 e 96.5 -> 97
    assert averages.aspirational.A == 4
    assert averages.aspirational.B == 97


def test_groups_by_question_and_keeps_first_title():
    subs = [
        submission(datetime(2025, 1, 3), [
            (2, "Leadership (new)", allocation(10, 20, 30, 40), allocation(40, 30, 20, 10)),
            (1, "Q1", allocation(40, 30, 20, 10), allocation(40, 30, 20, 10)),
        ]),
        submission(datetime(2025, 1, 2), [
            (2, "Leadership (old)", allocation(30, 20, 10, 40), allocation(40, 30, 20, 10)),
        ]),
        submission(datetime(2025, 1, 1), []),
    ]
    analytics = compute_analytics(subs)

    assert analytics.total_responses == 3
    assert set(analytics.question_analytics) == {1, 2}
    assert analytics.question_analytics[2].question_title == "Leadership (new)"
    assert analytics.question_analytics[2].averages.current.model_dump() == allocation(20, 20, 20, 40)
    assert analytics.date_range.first_response == datetime(2025, 1, 1)


def test_output_has_only_averages_and_is_deterministic():
    subs = [
        submission(datetime(2025, 1, 2), [(1, "Q1", allocation(40, 30, 20, 10), allocation(10, 20, 30, 40))]),
        submission(datetime(2025, 1, 1), [(1, "Q1", allocation(35, 25, 30, 10), allocation(45, 35, 15, 5))]),
    ]
    first = compute_analytics(subs).model_dump(by_alias=True, mode="json")
    second = compute_analytics(subs).model_dump(by_alias=True, mode="json")
    assert first == second
    assert set(first["questionAnalytics"]["1"]) == {"questionTitle", "averages"}
