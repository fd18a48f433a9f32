from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Optional, Union
from datetime import datetime

from exam_portal.core.constants import ExamSessionStatusEnum, OptionKeyEnum

class StartExamRequest(BaseModel):
    quiz_id: int
    question_count: int

class ExamStarted(BaseModel):
    exam_id: str

class ExamQuestion(BaseModel):
    """A question as the student sees it. There is deliberately no answer key field."""
    id: int
    text: str
    option1: str
    option2: str
    option3: str
    option4: str

class ExamView(BaseModel):
    exam_id: str
    quiz_name: str
    questions: List[ExamQuestion]

class SubmittedAnswer(BaseModel):
    question_id: int
    answer: Optional[OptionKeyEnum] = None

class SubmitExamRequest(BaseModel):
    answers: List[SubmittedAnswer] = []

class ExamResult(BaseModel):
    question_id: int
    question_text: str
    user_answer: Optional[str] = None
    correct_answer: str
    is_correct: bool

    model_config = ConfigDict(from_attributes=True, frozen=True)

class ExamSummary(BaseModel):
    total_questions: int
    correct_answers: int
    percentage: float
    results: List[ExamResult] = []

    model_config = ConfigDict(frozen=True)

class OpenExamState(BaseModel):
    status: Literal[ExamSessionStatusEnum.OPEN] = ExamSessionStatusEnum.OPEN
    started_at: datetime

class ClosedExamState(BaseModel):
    status: Literal[ExamSessionStatusEnum.CLOSED] = ExamSessionStatusEnum.CLOSED
    started_at: datetime
    submitted_at: datetime
    summary: ExamSummary

ExamSessionState = Annotated[Union[OpenExamState, ClosedExamState], Field(discriminator="status")]

class ExamSessionRecord(BaseModel):
    """Read model of an exam session; the summary is only reachable through the closed state."""
    id: str
    user_id: int
    quiz_id: int
    question_ids: List[int]
    state: ExamSessionState

    @property
    def is_submitted(self) -> bool:
        return isinstance(self.state, ClosedExamState)
