"""
Sessão do formulário em etapas: instruções, uma etapa por pergunta e os dados
do respondente. Guarda as respostas em andamento e envia tudo de uma vez
para a API (ou qualquer objeto com `submit_survey(payload) -> dict`).
"""
import enum
import time
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple

import pydantic
from loguru import logger
from pydantic import BaseModel

from catalog import list_questions
from errors import SurveyError, ValidationError
from schemas import (
    OPTION_LABELS, PointAllocation, Question, QuestionResponse, QuestionValidation,
    SurveySubmissionCreate, UserDetails, UserDetailsForm,
)
from validation import (
    clamp_points, round_half_up, validate_question, validate_user_details_form,
)

STATES = ("current", "aspirational")


# ==================== ETAPAS ====================

class StepKind(str, enum.Enum):
    INSTRUCTIONS = "instructions"
    QUESTION = "question"
    DETAILS = "details"


class Step(BaseModel):
    index: int
    kind: StepKind
    title: str
    question: Optional[Question] = None


def build_steps(questions: Sequence[Question]) -> List[Step]:
    """Índice 0 = instruções, 1..N = perguntas, N+1 = dados do respondente."""
    steps = [Step(index=0, kind=StepKind.INSTRUCTIONS, title="Assessment Instructions")]
    for position, question in enumerate(questions, start=1):
        steps.append(Step(index=position, kind=StepKind.QUESTION,
                          title=f"Question {question.id}", question=question))
    steps.append(Step(index=len(steps), kind=StepKind.DETAILS, title="User Details"))
    return steps


class StepNavigator:
    """Navegação linear entre as etapas; avançar exige a etapa atual válida."""

    def __init__(self, steps: Sequence[Step]):
        self.steps = list(steps)
        self.current_index = 0
        self.completed: Set[int] = set()
        self.validity: Dict[int, bool] = {0: True}  # instruções são sempre válidas

    @property
    def current_step(self) -> Step:
        return self.steps[self.current_index]

    @property
    def is_last_step(self) -> bool:
        return self.current_index == len(self.steps) - 1

    def set_validity(self, index: int, is_valid: bool) -> None:
        self.validity[index] = is_valid

    def is_valid(self, index: int) -> bool:
        return self.validity.get(index, False)

    @property
    def can_go_next(self) -> bool:
        return not self.is_last_step and self.is_valid(self.current_index)

    @property
    def can_go_previous(self) -> bool:
        return self.current_index > 0

    def next(self) -> bool:
        if not self.is_valid(self.current_index):
            return False
        self.completed.add(self.current_index)
        if not self.is_last_step:
            self.current_index += 1
        return True

    def previous(self) -> bool:
        if self.current_index == 0:
            return False
        self.current_index -= 1
        return True


def progress_percentage(completed_questions: int, has_user_details: bool, total_questions: int) -> int:
    done = completed_questions + (1 if has_user_details else 0)
    return round_half_up(100 * done, total_questions + 1)


# ==================== SUBMISSÃO ====================

class SurveyGateway(Protocol):
    def submit_survey(self, payload: dict) -> dict: ...


class SubmitResult(BaseModel):
    success: bool
    submission_id: Optional[int] = None
    redirect_url: Optional[str] = None
    error: Optional[str] = None


class SurveyProgress(BaseModel):
    completed_questions: int
    total_questions: int
    has_user_details: bool
    progress_percentage: int


class SurveySession:
    """Estado de um respondente preenchendo o formulário.

    Nada é persistido até `submit()`; se a sessão for abandonada, os dados
    somem junto com ela. Uma falha no envio mantém tudo o que foi digitado.
    """

    def __init__(self, gateway: SurveyGateway, questions: Optional[Sequence[Question]] = None,
                 clock: Callable[[], float] = time.time):
        self.gateway = gateway
        self.questions = list(questions) if questions is not None else list_questions()
        self.clock = clock
        self.navigator = StepNavigator(build_steps(self.questions))
        self.reset()

    def reset(self) -> None:
        self.navigator.current_index = 0
        self.navigator.completed = set()
        self.navigator.validity = {0: True}
        self.start_time = self.clock()
        self.user_details: Optional[UserDetails] = None
        self.question_responses: List[QuestionResponse] = []
        self.details_form = UserDetailsForm()
        self._drafts: Dict[int, Dict[str, PointAllocation]] = {}
        self.is_submitting = False
        self.submit_success = False
        self.submit_error: Optional[str] = None
        self.last_result: Optional[SubmitResult] = None

    # ---------- respostas ----------

    def get_question_response(self, question_id: int) -> Optional[QuestionResponse]:
        for response in self.question_responses:
            if response.question_id == question_id:
                return response
        return None

    def save_question_response(self, response: QuestionResponse) -> None:
        # Uma resposta por pergunta: salvar de novo substitui no mesmo lugar
        for position, existing in enumerate(self.question_responses):
            if existing.question_id == response.question_id:
                self.question_responses[position] = response
                return
        self.question_responses.append(response)

    def points_for(self, question_id: int) -> Tuple[PointAllocation, PointAllocation]:
        """Pontos em edição; ao voltar para a pergunta, parte da resposta salva."""
        if question_id not in self._drafts:
            saved = self.get_question_response(question_id)
            if saved:
                self._drafts[question_id] = {
                    "current": saved.current_state.model_copy(),
                    "aspirational": saved.aspirational_state.model_copy(),
                }
            else:
                self._drafts[question_id] = {
                    "current": PointAllocation.empty(),
                    "aspirational": PointAllocation.empty(),
                }
        draft = self._drafts[question_id]
        return draft["current"], draft["aspirational"]

    def set_points(self, question_id: int, state: str, option: str, value) -> QuestionValidation:
        if state not in STATES:
            raise ValueError(f"unknown state {state!r}")
        if option not in OPTION_LABELS:
            raise ValueError(f"unknown option {option!r}")
        self.points_for(question_id)
        draft = self._drafts[question_id]
        draft[state] = draft[state].model_copy(update={option: clamp_points(value)})
        return self.validate_step(self._step_index(question_id))

    def _step_index(self, question_id: int) -> int:
        for step in self.navigator.steps:
            if step.kind == StepKind.QUESTION and step.question.id == question_id:
                return step.index
        raise ValueError(f"question {question_id} is not part of this survey")

    # ---------- dados do respondente ----------

    def update_details(self, **fields) -> Dict[str, str]:
        """Atualiza campos do formulário final e devolve os erros atuais."""
        self.details_form = self.details_form.model_copy(update=fields)
        self.validate_step(self.navigator.steps[-1].index)
        return validate_user_details_form(self.details_form)

    def save_user_details(self, form: Optional[UserDetailsForm] = None) -> UserDetails:
        form = form or self.details_form
        errors = validate_user_details_form(form)
        if errors:
            raise ValidationError("Please complete the required details", "; ".join(errors.values()))
        try:
            details = UserDetails(
                full_name=f"{form.first_name.strip()} {form.last_name.strip()}".strip(),
                email=form.email,
                designation=form.designation,
                office_typology=form.office_typology,
                cohort_team=form.cohort_team,
                company=form.company,
            )
        except pydantic.ValidationError as e:
            raise ValidationError("Invalid user details", str(e))
        self.user_details = details
        return details

    # ---------- navegação ----------

    def validate_step(self, index: Optional[int] = None) -> QuestionValidation:
        """Reavalia a etapa (atual por padrão) e atualiza o mapa de validade."""
        step = self.navigator.steps[self.navigator.current_index if index is None else index]
        if step.kind == StepKind.INSTRUCTIONS:
            result = QuestionValidation(is_valid=True)
        elif step.kind == StepKind.QUESTION:
            current, aspirational = self.points_for(step.question.id)
            result = validate_question(current, aspirational)
        else:
            errors = validate_user_details_form(self.details_form)
            result = QuestionValidation(is_valid=not errors, message=next(iter(errors.values()), ""))
        self.navigator.set_validity(step.index, result.is_valid)
        return result

    def confirm_question(self) -> bool:
        """Salva a resposta da pergunta atual e avança; False se os pontos forem inválidos."""
        step = self.navigator.current_step
        if step.kind != StepKind.QUESTION:
            raise ValueError(f"step {step.index} is not a question")
        if not self.validate_step().is_valid:
            return False
        current, aspirational = self.points_for(step.question.id)
        self.save_question_response(QuestionResponse(
            question_id=step.question.id,
            question_title=step.question.title,
            current_state=current.model_copy(),
            aspirational_state=aspirational.model_copy(),
        ))
        return self.navigator.next()

    def next(self) -> bool:
        """Avança uma etapa. Numa pergunta, equivale a confirm_question()."""
        step = self.navigator.current_step
        if step.kind == StepKind.DETAILS:
            return False  # última etapa: o próximo passo é submit()
        if step.kind == StepKind.QUESTION:
            return self.confirm_question()
        if not self.validate_step().is_valid:
            return False
        return self.navigator.next()

    def previous(self) -> bool:
        return self.navigator.previous()

    def progress(self) -> SurveyProgress:
        total = len(self.questions)
        completed = len(self.question_responses)
        has_details = self.user_details is not None
        return SurveyProgress(
            completed_questions=completed,
            total_questions=total,
            has_user_details=has_details,
            progress_percentage=progress_percentage(completed, has_details, total),
        )

    # ---------- envio ----------

    @property
    def can_submit(self) -> bool:
        # O botão de envio fica desabilitado durante o envio e depois do sucesso
        return not self.is_submitting and not self.submit_success

    def completion_time(self) -> int:
        elapsed_ms = max(0, int((self.clock() - self.start_time) * 1000))
        return round_half_up(elapsed_ms, 1000)

    def build_payload(self, user_details: UserDetails) -> dict:
        submission = SurveySubmissionCreate(
            user_details=user_details,
            question_responses=self.question_responses,
            completion_time=self.completion_time(),
        )
        return submission.model_dump(by_alias=True, mode="json", exclude_none=True)

    def submit(self, user_details: Optional[UserDetails] = None) -> SubmitResult:
        if self.is_submitting:
            raise ValidationError("submission already in progress")
        if self.submit_success and self.last_result is not None:
            logger.warning("⚠️ Pesquisa já enviada; reenvio ignorado")
            return self.last_result

        details = user_details or self.user_details
        if details is None:
            self.submit_error = "missing user details"
            raise ValidationError("missing user details")
        if not self.question_responses:
            self.submit_error = "incomplete questions"
            raise ValidationError("incomplete questions")
        self.user_details = details

        self.is_submitting = True
        self.submit_error = None
        self.submit_success = False
        try:
            data = self.gateway.submit_survey(self.build_payload(details))
        except SurveyError as e:
            logger.error(f"❌ Falha ao enviar pesquisa: {e.message}")
            self.submit_error = e.message
            return SubmitResult(success=False, error=e.message)
        finally:
            self.is_submitting = False

        self.submit_success = True
        self.last_result = SubmitResult(
            success=True,
            submission_id=data.get("id"),
            redirect_url=data.get("redirectUrl"),
        )
        logger.info(f"✅ Pesquisa enviada: id={self.last_result.submission_id}")
        return self.last_result
