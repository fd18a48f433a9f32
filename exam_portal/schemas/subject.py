from pydantic import BaseModel, ConfigDict, field_validator
from typing import List

from exam_portal.schemas.quiz import QuizSummary

class SubjectBase(BaseModel):
    name: str

    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Subject name is required")
        return v.strip()

class SubjectCreate(SubjectBase):
    pass

class SubjectUpdate(SubjectBase):
    pass

class Subject(SubjectBase):
    id: int

    model_config = ConfigDict(from_attributes=True)

class SubjectWithQuizzes(Subject):
    quizzes: List[QuizSummary] = []
