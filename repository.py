from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from errors import NotFoundError
from models import QuestionResponseRecord, SurveySubmission
from schemas import SurveySubmissionCreate


def _newest_first(query):
    return query.order_by(SurveySubmission.submitted_at.desc(), SurveySubmission.id.desc())


def _company_filter(company_name: str):
    # Substring sem diferenciar maiúsculas; % e _ digitados são tratados como texto
    return SurveySubmission.company_name.icontains(company_name, autoescape=True)


def create_submission(
    db: Session,
    payload: SurveySubmissionCreate,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> SurveySubmission:
    """Grava a submissão e suas respostas numa única transação."""
    details = payload.user_details
    submission = SurveySubmission(
        full_name=details.full_name,
        email=details.email,
        phone_number=details.phone_number,
        designation=details.designation,
        cohort_team=details.cohort_team,
        office_typology=details.office_typology,
        company=details.company,
        company_name=payload.company_name.strip() if payload.company_name else None,
        completion_time=payload.completion_time,
        ip_address=ip_address,
        user_agent=user_agent,
        submitted_at=datetime.utcnow(),
    )
    for position, response in enumerate(payload.question_responses):
        submission.question_responses.append(
            QuestionResponseRecord(
                position=position,
                question_id=response.question_id,
                question_title=response.question_title,
                current_state=response.current_state.model_dump(),
                aspirational_state=response.aspirational_state.model_dump(),
            )
        )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def list_submissions(db: Session, page: int, limit: int) -> Tuple[List[SurveySubmission], int]:
    rows = (
        _newest_first(db.query(SurveySubmission))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(SurveySubmission.id)).scalar()
    return rows, total


def get_submission(db: Session, submission_id: int) -> SurveySubmission:
    submission = (
        db.query(SurveySubmission)
        .options(selectinload(SurveySubmission.question_responses))
        .filter(SurveySubmission.id == submission_id)
        .first()
    )
    if not submission:
        raise NotFoundError("Survey response not found")
    return submission


def find_by_company(db: Session, company_name: str, page: int, limit: int) -> Tuple[List[SurveySubmission], int]:
    rows = (
        _newest_first(db.query(SurveySubmission))
        .options(selectinload(SurveySubmission.question_responses))
        .filter(_company_filter(company_name))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = (
        db.query(func.count(SurveySubmission.id))
        .filter(_company_filter(company_name))
        .scalar()
    )
    return rows, total


def all_for_company(db: Session, company_name: str) -> List[SurveySubmission]:
    """Todas as submissões da empresa, da mais nova para a mais antiga."""
    return (
        _newest_first(db.query(SurveySubmission))
        .options(selectinload(SurveySubmission.question_responses))
        .filter(_company_filter(company_name))
        .all()
    )
