from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional

class QuizBase(BaseModel):
    subject_id: int
    name: str
    description: Optional[str] = ""

    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Quiz name is required")
        return v.strip()

    @field_validator("description")
    def default_description(cls, v):
        return v or ""

class QuizCreate(QuizBase):
    pass

class QuizUpdate(QuizBase):
    pass

class Quiz(QuizBase):
    id: int

    model_config = ConfigDict(from_attributes=True)

class QuizSummary(Quiz):
    subject_name: str
    question_count: int
