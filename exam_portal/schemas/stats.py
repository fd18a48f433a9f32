from pydantic import BaseModel

class Stats(BaseModel):
    subjects_count: int
    quizzes_count: int
    questions_count: int
    students_count: int
