from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, UniqueConstraint, event
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime
from typing import Optional
import re

Base = declarative_base()

# Sufixos removidos do domínio do email ao derivar o nome da empresa
TLD_SUFFIX = re.compile(r"\.(com|org|net|edu|gov|mil|int|co\.uk|co\.in|in)$", re.IGNORECASE)


def derive_company_name(email: Optional[str]) -> Optional[str]:
    """Deriva o nome da empresa a partir do domínio do email.

    "jane@acme-labs.co.uk" -> "Acme-labs", "joe@mail.globex.com" -> "Mail Globex".
    """
    if not email or "@" not in email:
        return None
    domain = email.split("@")[1]
    domain = TLD_SUFFIX.sub("", domain).replace(".", " ").lower()
    return " ".join(word[:1].upper() + word[1:] for word in domain.split(" "))


# ==================== MODELO DE SUBMISSÃO ====================

class SurveySubmission(Base):
    """Submissão completa da pesquisa (dados do respondente + respostas)"""
    __tablename__ = "survey_submissions"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), index=True, nullable=False)
    phone_number = Column(String(50), default="")
    designation = Column(String(100), nullable=False)
    cohort_team = Column(String(100), nullable=False)
    office_typology = Column(String(100), nullable=False)
    company = Column(String(200), nullable=False)
    company_name = Column(String(200), index=True, nullable=True)  # derivado do email se não informado
    completion_time = Column(Integer, nullable=True)  # em segundos
    ip_address = Column(String(100), nullable=True)
    user_agent = Column(String(500), nullable=True)
    submitted_at = Column(DateTime, default=datetime.utcnow, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relacionamentos
    question_responses = relationship(
        "QuestionResponseRecord",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="QuestionResponseRecord.position",
    )

    @property
    def user_details(self) -> dict:
        return {
            "full_name": self.full_name,
            "email": self.email,
            "phone_number": self.phone_number or "",
            "designation": self.designation,
            "cohort_team": self.cohort_team,
            "office_typology": self.office_typology,
            "company": self.company,
        }

    def __repr__(self):
        return f"<SurveySubmission(id={self.id}, email={self.email}, company_name={self.company_name})>"


class QuestionResponseRecord(Base):
    """Resposta de uma pergunta dentro de uma submissão"""
    __tablename__ = "question_responses"
    __table_args__ = (
        UniqueConstraint("submission_id", "question_id", name="uq_submission_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(Integer, ForeignKey("survey_submissions.id"), nullable=False)
    position = Column(Integer, nullable=False)  # ordem em que foi enviada
    question_id = Column(Integer, nullable=False, index=True)
    question_title = Column(String(255), nullable=False)
    current_state = Column(JSON, nullable=False)  # {"A": 40, "B": 30, "C": 20, "D": 10}
    aspirational_state = Column(JSON, nullable=False)

    # Relacionamentos
    submission = relationship("SurveySubmission", back_populates="question_responses")


@event.listens_for(SurveySubmission, "before_insert")
def set_company_name(mapper, connection, target):
    # Só na criação: o nome derivado nunca é recalculado depois
    if target.email and not target.company_name:
        target.company_name = derive_company_name(target.email)
