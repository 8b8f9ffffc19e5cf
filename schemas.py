from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Dict, List, Optional
import re

OPTION_LABELS = ("A", "B", "C", "D")
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


class CamelModel(BaseModel):
    """Base dos schemas expostos na API (JSON em camelCase)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ==================== SCHEMAS DO QUESTIONÁRIO ====================

class Question(BaseModel):
    """Pergunta do catálogo: exatamente quatro opções (A, B, C, D)."""
    id: int = Field(..., ge=1)
    title: str
    options: List[str] = Field(..., min_length=4, max_length=4)


class QuestionCatalog(CamelModel):
    questions: List[Question]
    designations: List[str]
    office_typologies: List[str]
    cohort_teams: List[str]


# ==================== SCHEMAS DE RESPOSTA ====================

class PointAllocation(BaseModel):
    """Distribuição de 100 pontos entre as quatro opções."""
    A: int = Field(..., ge=0, le=100)
    B: int = Field(..., ge=0, le=100)
    C: int = Field(..., ge=0, le=100)
    D: int = Field(..., ge=0, le=100)

    @classmethod
    def empty(cls) -> "PointAllocation":
        return cls(A=0, B=0, C=0, D=0)

    def values(self) -> List[int]:
        return [getattr(self, label) for label in OPTION_LABELS]


class QuestionResponse(CamelModel):
    """Resposta de uma pergunta (estado atual e aspiracional)"""
    question_id: int = Field(..., ge=1)
    question_title: str
    current_state: PointAllocation
    aspirational_state: PointAllocation


class AllocationCheck(CamelModel):
    current_state: PointAllocation
    aspirational_state: PointAllocation


class QuestionValidation(CamelModel):
    is_valid: bool
    message: str = ""


# ==================== SCHEMAS DE USUÁRIO ====================

class UserDetails(CamelModel):
    """Dados do respondente enviados junto com a pesquisa."""
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str
    phone_number: str = ""
    designation: str = Field(..., min_length=1)
    cohort_team: str = Field(..., min_length=1)
    office_typology: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)

    @field_validator("full_name", "phone_number", "designation", "cohort_team",
                     "office_typology", "company", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        # Mesma regra do formulário: algo@algo.algo, sem checar o domínio
        if not EMAIL_PATTERN.search(value):
            raise ValueError("Please enter a valid email")
        return value


class UserContact(CamelModel):
    full_name: str
    email: str


class UserDetailsForm(CamelModel):
    """Campos do formulário final como o respondente digita (nome separado)."""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    designation: str = ""
    office_typology: str = ""
    cohort_team: str = ""
    company: str = ""


# ==================== SCHEMAS DE SUBMISSÃO ====================

class SurveySubmissionCreate(CamelModel):
    """Payload do POST /api/surveys"""
    user_details: UserDetails
    question_responses: List[QuestionResponse] = Field(..., min_length=1)
    completion_time: Optional[int] = Field(None, ge=0)
    company_name: Optional[str] = None

    @model_validator(mode="after")
    def unique_questions(self):
        ids = [r.question_id for r in self.question_responses]
        if len(ids) != len(set(ids)):
            raise ValueError("questionResponses must contain at most one response per question")
        return self


class SurveySubmissionOut(CamelModel):
    id: int
    user_details: UserDetails
    question_responses: List[QuestionResponse]
    completion_time: Optional[int] = None
    submitted_at: datetime
    company_name: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SurveySummary(CamelModel):
    """Projeção usada na listagem geral"""
    id: int
    user_details: UserContact
    company_name: Optional[str] = None
    submitted_at: datetime


class SubmitReceipt(CamelModel):
    id: int
    submitted_at: datetime
    company_name: Optional[str] = None
    redirect_url: str


# ==================== SCHEMAS DE ANALYTICS ====================

class StateAverages(CamelModel):
    current: PointAllocation
    aspirational: PointAllocation


class QuestionAnalytics(CamelModel):
    question_title: str
    averages: StateAverages


class DateRange(CamelModel):
    first_response: datetime
    last_response: datetime


class CompanyAnalytics(CamelModel):
    """Visão agregada (médias) de todas as respostas de uma empresa"""
    company_name: Optional[str] = None
    total_responses: int
    date_range: DateRange
    question_analytics: Dict[int, QuestionAnalytics]


# ==================== ENVELOPES DE RESPOSTA ====================

class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_records: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = -(-total // limit)
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_records=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class SubmitResponse(CamelModel):
    success: bool = True
    message: str = "Survey submitted successfully"
    data: SubmitReceipt


class SurveyListResponse(CamelModel):
    success: bool = True
    data: List[SurveySummary]
    pagination: Pagination


class CompanySurveysResponse(CamelModel):
    success: bool = True
    data: List[SurveySubmissionOut]
    pagination: Pagination


class SurveyDetailResponse(CamelModel):
    success: bool = True
    data: SurveySubmissionOut


class AnalyticsResponse(CamelModel):
    success: bool = True
    data: CompanyAnalytics


class ErrorResponse(CamelModel):
    """Formato único de erro devolvido pela API."""
    success: bool = False
    message: str
    error: Optional[str] = None
