import pytest

from errors import ValidationError
from schemas import PointAllocation, QuestionResponse, UserDetailsForm
from validation import (
    ASPIRATIONAL_EQUAL_MESSAGE, CURRENT_EQUAL_MESSAGE, TOTALS_MESSAGE,
    allocation_total, check_submission_totals, clamp_points, has_equal_points,
    is_allocation_valid, is_user_details_valid, round_half_up, validate_question,
    validate_user_details_form,
)


def points(a, b, c, d):
    return PointAllocation(A=a, B=b, C=c, D=d)


@pytest.mark.parametrize("values, expected", [
    ((25, 25, 25, 25), False),
    ((40, 30, 20, 10), True),
    ((50, 50, 0, 0), False),
    ((0, 0, 100, 0), True),
    ((40, 30, 20, 9), False),
    ((40, 30, 20, 11), False),
    ((60, 0, 40, 0), True),
    ((0, 0, 0, 0), False),
])
def test_allocation_validity(values, expected):
    assert is_allocation_valid(points(*values)) is expected


def test_equal_points_ignores_zero_ties():
    assert has_equal_points(points(0, 0, 60, 40)) is False
    assert has_equal_points(points(10, 45, 45, 0)) is True
    assert allocation_total(points(10, 45, 45, 0)) == 100


def test_validate_question_message_priority():
    tie = points(50, 50, 0, 0)
    good = points(40, 30, 20, 10)
    short = points(40, 30, 20, 9)

    # totais vêm antes dos empates, mesmo com empate no estado atual
    assert validate_question(tie, short).message == TOTALS_MESSAGE
    assert validate_question(tie, tie).message == CURRENT_EQUAL_MESSAGE
    assert validate_question(good, tie).message == ASPIRATIONAL_EQUAL_MESSAGE

    result = validate_question(good, points(0, 0, 100, 0))
    assert result.is_valid is True
    assert result.message == ""


@pytest.mark.parametrize("raw, expected", [
    (50, 50), ("35", 35), (-5, 0), (150, 100), ("abc", 0), (None, 0), ("", 0),
])
def test_clamp_points(raw, expected):
    assert clamp_points(raw) == expected


def test_round_half_up():
    assert round_half_up(3, 2) == 2      # 1.5
    assert round_half_up(5, 2) == 3      # 2.5, round() daria 2
    assert round_half_up(149, 100) == 1
    assert round_half_up(0, 7) == 0
    with pytest.raises(ValueError):
        round_half_up(1, 0)


def test_user_details_form_required_fields():
    errors = validate_user_details_form(UserDetailsForm(first_name="  ", email="nope"))
    assert errors["firstName"] == "First Name is required"
    assert errors["lastName"] == "Last Name is required"
    assert errors["email"] == "Please enter a valid email"
    assert errors["designation"] == "Designation is required"
    assert errors["officeTypology"] == "Office Typology is required"
    assert errors["cohortTeam"] == "Cohort/Team is required"
    assert errors["company"] == "Company is required"

    assert validate_user_details_form(UserDetailsForm())["email"] == "Email is required"


def test_user_details_form_valid():
    form = UserDetailsForm(
        first_name="Jane", last_name="Doe", email="jane@acme.com",
        designation="HQ", office_typology="HQ", cohort_team="Finance", company="Acme",
    )
    assert is_user_details_valid(form)


def response(question_id, current, aspirational):
    return QuestionResponse(
        question_id=question_id,
        question_title=f"Question {question_id}",
        current_state=points(*current),
        aspirational_state=points(*aspirational),
    )


def test_server_check_rejects_99_and_101():
    ok = response(1, (40, 30, 20, 10), (10, 20, 30, 40))
    check_submission_totals([ok])

    with pytest.raises(ValidationError) as exc:
        check_submission_totals([ok, response(2, (40, 30, 20, 9), (10, 20, 30, 40))])
    assert exc.value.message.startswith("Question 2:")

    with pytest.raises(ValidationError):
        check_submission_totals([response(3, (40, 30, 20, 10), (10, 20, 30, 41))])


def test_server_check_allows_ties():
    # a regra de empate é só do formulário
    check_submission_totals([response(1, (25, 25, 25, 25), (50, 50, 0, 0))])
