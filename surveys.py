from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from loguru import logger
import os

from catalog import get_catalog
from db import get_db
from errors import TransportError
import repository
from schemas import (
    CompanySurveysResponse, Pagination, QuestionCatalog, SubmitReceipt, SubmitResponse,
    SurveyDetailResponse, SurveyListResponse, SurveySubmissionCreate, SurveySubmissionOut,
    SurveySummary,
)
from validation import check_submission_totals

router = APIRouter()

REDIRECT_BASE_URL = os.getenv(
    "REDIRECT_BASE_URL",
    "https://blog.staging.smdclab.com/process-type-form/get-user-response",
).rstrip("/")

PAGE = Query(1, ge=1)
LIMIT = Query(10, ge=1, le=100)


@router.get("/api/surveys/questions", response_model=QuestionCatalog, tags=["Surveys"])
def listar_perguntas():
    """Perguntas do formulário e as opções dos campos de seleção."""
    return get_catalog()


@router.post(
    "/api/surveys",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Surveys"],
)
def enviar_resposta(survey: SurveySubmissionCreate, request: Request, db: Session = Depends(get_db)):
    logger.info(f"📝 Nova submissão de {survey.user_details.email} ({len(survey.question_responses)} respostas)")

    # Totais de 100 pontos conferidos mesmo que o front-end tenha sido contornado
    check_submission_totals(survey.question_responses)

    try:
        submission = repository.create_submission(
            db,
            survey,
            ip_address=request.headers.get("x-forwarded-for") or "unknown",
            user_agent=request.headers.get("user-agent") or "unknown",
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Erro ao salvar submissão: {str(e)}")
        raise TransportError("Failed to submit survey", e)

    logger.info(f"✅ Submissão salva: id={submission.id} empresa={submission.company_name}")
    return SubmitResponse(
        data=SubmitReceipt(
            id=submission.id,
            submitted_at=submission.submitted_at,
            company_name=submission.company_name,
            redirect_url=f"{REDIRECT_BASE_URL}/{submission.id}",
        )
    )


@router.get("/api/surveys", response_model=SurveyListResponse, tags=["Surveys"])
def listar_respostas(page: int = PAGE, limit: int = LIMIT, db: Session = Depends(get_db)):
    try:
        rows, total = repository.list_submissions(db, page, limit)
    except SQLAlchemyError as e:
        logger.error(f"❌ Erro ao listar submissões: {str(e)}")
        raise TransportError("Failed to fetch surveys", e)

    return SurveyListResponse(
        data=[SurveySummary.model_validate(row) for row in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/api/surveys/company/{company_name}", response_model=CompanySurveysResponse, tags=["Surveys"])
def listar_por_empresa(company_name: str, page: int = PAGE, limit: int = LIMIT, db: Session = Depends(get_db)):
    try:
        rows, total = repository.find_by_company(db, company_name, page, limit)
    except SQLAlchemyError as e:
        logger.error(f"❌ Erro ao buscar submissões da empresa '{company_name}': {str(e)}")
        raise TransportError("Failed to fetch company surveys", e)

    logger.info(f"🔎 Empresa '{company_name}': {total} submissões encontradas")
    return CompanySurveysResponse(
        data=[SurveySubmissionOut.model_validate(row) for row in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/api/surveys/{survey_id}", response_model=SurveyDetailResponse, tags=["Surveys"])
def detalhar_resposta(survey_id: int, db: Session = Depends(get_db)):
    try:
        submission = repository.get_submission(db, survey_id)
    except SQLAlchemyError as e:
        logger.error(f"❌ Erro ao buscar submissão {survey_id}: {str(e)}")
        raise TransportError("Failed to fetch survey", e)

    return SurveyDetailResponse(data=SurveySubmissionOut.model_validate(submission))
