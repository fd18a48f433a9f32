from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, Boolean, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from exam_portal.core.database import Base
from exam_portal.core.constants import ExamSessionStatusEnum

class ExamSession(Base):
    __tablename__ = "exam_sessions"

    # user_id and quiz_id are plain references: results must outlive admin deletions
    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    quiz_id = Column(Integer, nullable=False, index=True)
    question_ids = Column(JSON, nullable=False)  # presentation order, fixed at start
    answers = Column(JSON, nullable=True)
    status = Column(Enum(ExamSessionStatusEnum), nullable=False, default=ExamSessionStatusEnum.OPEN, index=True)
    total_questions = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=True)
    percentage = Column(Float, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    results = relationship(
        "ExamResultItem",
        back_populates="exam_session",
        cascade="all, delete-orphan",
        order_by="ExamResultItem.position"
    )


class ExamResultItem(Base):
    __tablename__ = "exam_result_items"

    id = Column(Integer, primary_key=True, index=True)
    exam_session_id = Column(String(36), ForeignKey("exam_sessions.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    question_id = Column(Integer, nullable=False)
    question_text = Column(String, nullable=False)
    user_answer = Column(String, nullable=True)
    correct_answer = Column(String, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    exam_session = relationship("ExamSession", back_populates="results")
