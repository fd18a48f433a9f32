from pydantic import BaseModel, ConfigDict, field_validator

from exam_portal.core.constants import OptionKeyEnum

class QuestionBase(BaseModel):
    quiz_id: int
    text: str
    option1: str
    option2: str
    option3: str
    option4: str
    correct: OptionKeyEnum

    @field_validator("text", "option1", "option2", "option3", "option4")
    def validate_not_blank(cls, v, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v

class QuestionCreate(QuestionBase):
    pass

class QuestionUpdate(QuestionBase):
    pass

class Question(QuestionBase):
    """Admin view of a question, including its answer key."""
    id: int

    model_config = ConfigDict(from_attributes=True)

class QuestionWithQuizName(Question):
    quiz_name: str
