from typing import Dict, Iterable, Union

from fastapi import APIRouter

from errors import ValidationError
from schemas import (
    EMAIL_PATTERN, AllocationCheck, PointAllocation, QuestionResponse, QuestionValidation,
    UserDetailsForm,
)

router = APIRouter()

TOTAL_POINTS = 100

TOTALS_MESSAGE = "Please ensure both Current and Aspirational states total exactly 100 points each."
CURRENT_EQUAL_MESSAGE = "Current State: Do not assign equal points to any of the four options."
ASPIRATIONAL_EQUAL_MESSAGE = "Aspirational State: Do not assign equal points to any of the four options."


# ==================== ARREDONDAMENTO ====================

def round_half_up(numerator: int, denominator: int) -> int:
    """Divide e arredonda .5 para cima, com aritmética inteira exata.

    Equivale ao Math.round do front-end para valores não negativos;
    o round() do Python arredondaria 2.5 para 2.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


# ==================== PONTOS ====================

def allocation_total(allocation: PointAllocation) -> int:
    return sum(allocation.values())


def has_equal_points(allocation: PointAllocation) -> bool:
    """True se duas opções receberam a mesma pontuação não nula."""
    values = allocation.values()
    for i in range(len(values)):
        for j in range(i + 1, len(values)):
            if values[i] == values[j] and values[i] > 0:
                return True
    return False


def is_allocation_valid(allocation: PointAllocation) -> bool:
    return allocation_total(allocation) == TOTAL_POINTS and not has_equal_points(allocation)


def validate_question(current: PointAllocation, aspirational: PointAllocation) -> QuestionValidation:
    """Valida uma etapa de pergunta; a mensagem segue a ordem de prioridade da tela."""
    if allocation_total(current) != TOTAL_POINTS or allocation_total(aspirational) != TOTAL_POINTS:
        return QuestionValidation(is_valid=False, message=TOTALS_MESSAGE)
    if has_equal_points(current):
        return QuestionValidation(is_valid=False, message=CURRENT_EQUAL_MESSAGE)
    if has_equal_points(aspirational):
        return QuestionValidation(is_valid=False, message=ASPIRATIONAL_EQUAL_MESSAGE)
    return QuestionValidation(is_valid=True)


def clamp_points(value: Union[int, str, None]) -> int:
    """Normaliza o valor digitado: não numérico vira 0, limitado a [0, 100]."""
    try:
        points = int(value)
    except (TypeError, ValueError):
        points = 0
    return max(0, min(TOTAL_POINTS, points))


def check_submission_totals(question_responses: Iterable[QuestionResponse]) -> None:
    """Checagem do servidor: só os totais de 100 pontos (não a regra de empate)."""
    for response in question_responses:
        current_total = allocation_total(response.current_state)
        aspirational_total = allocation_total(response.aspirational_state)
        if current_total != TOTAL_POINTS or aspirational_total != TOTAL_POINTS:
            raise ValidationError(
                f"Question {response.question_id}: Points must total exactly 100 "
                f"for both current and aspirational states",
                f"current: {current_total}, aspirational: {aspirational_total}",
            )


# ==================== DADOS DO USUÁRIO ====================

def validate_user_details_form(form: UserDetailsForm) -> Dict[str, str]:
    """Retorna {campo: mensagem} para cada campo inválido (vazio = formulário ok)."""
    errors = {}
    if not form.first_name.strip():
        errors["firstName"] = "First Name is required"
    if not form.last_name.strip():
        errors["lastName"] = "Last Name is required"
    if not form.email.strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(form.email):
        errors["email"] = "Please enter a valid email"
    if not form.designation.strip():
        errors["designation"] = "Designation is required"
    if not form.office_typology.strip():
        errors["officeTypology"] = "Office Typology is required"
    if not form.cohort_team.strip():
        errors["cohortTeam"] = "Cohort/Team is required"
    if not form.company.strip():
        errors["company"] = "Company is required"
    return errors


def is_user_details_valid(form: UserDetailsForm) -> bool:
    return not validate_user_details_form(form)


# ==================== ENDPOINT ====================

@router.post("/api/surveys/validate", response_model=QuestionValidation, tags=["Surveys"])
def validar_alocacao(item: AllocationCheck):
    return validate_question(item.current_state, item.aspirational_state)
