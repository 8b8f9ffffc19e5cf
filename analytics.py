from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from loguru import logger
from typing import Dict, List, Sequence

from db import get_db
from errors import NotFoundError, TransportError
import repository
from schemas import (
    OPTION_LABELS, AnalyticsResponse, CompanyAnalytics, DateRange, PointAllocation,
    QuestionAnalytics, StateAverages,
)
from validation import round_half_up

router = APIRouter()


def _average(states: List[PointAllocation]) -> PointAllocation:
    count = len(states)
    return PointAllocation(**{
        label: round_half_up(sum(getattr(state, label) for state in states), count)
        for label in OPTION_LABELS
    })


def compute_analytics(submissions: Sequence) -> CompanyAnalytics:
    """
    Agrega as submissões de uma empresa em médias por pergunta.

    `submissions` deve vir ordenado da mais nova para a mais antiga. Cada média
    é arredondada com .5 para cima; os valores individuais não saem no resultado.
    """
    if not submissions:
        raise NotFoundError("No surveys found for this company")

    titles: Dict[int, str] = {}
    current: Dict[int, List[PointAllocation]] = {}
    aspirational: Dict[int, List[PointAllocation]] = {}
    for submission in submissions:
        for response in submission.question_responses:
            question_id = response.question_id
            if question_id not in titles:
                titles[question_id] = response.question_title
                current[question_id] = []
                aspirational[question_id] = []
            current[question_id].append(PointAllocation.model_validate(response.current_state))
            aspirational[question_id].append(PointAllocation.model_validate(response.aspirational_state))

    question_analytics = {
        question_id: QuestionAnalytics(
            question_title=title,
            averages=StateAverages(
                current=_average(current[question_id]),
                aspirational=_average(aspirational[question_id]),
            ),
        )
        for question_id, title in titles.items()
    }

    return CompanyAnalytics(
        company_name=submissions[0].company_name,
        total_responses=len(submissions),
        date_range=DateRange(
            first_response=submissions[-1].submitted_at,
            last_response=submissions[0].submitted_at,
        ),
        question_analytics=question_analytics,
    )


# ================= ANALYTICS ENDPOINTS =================

@router.get("/api/surveys/analytics/{company_name}", response_model=AnalyticsResponse, tags=["Analytics"])
def analisar_empresa(company_name: str, db: Session = Depends(get_db)):
    """
    Analisa todas as respostas de uma empresa e retorna as médias por pergunta.
    """
    try:
        submissions = repository.all_for_company(db, company_name)
    except SQLAlchemyError as e:
        logger.error(f"❌ Erro ao gerar analytics de '{company_name}': {str(e)}")
        raise TransportError("Failed to generate analytics", e)
    analytics = compute_analytics(submissions)
    logger.info(f"📊 Analytics gerado para '{company_name}': {analytics.total_responses} respostas")
    return AnalyticsResponse(data=analytics)
