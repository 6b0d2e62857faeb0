from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from gradebook.db.base import Base

MIN_GRADE = 0
MAX_GRADE = 100


class Grade(Base):
    __tablename__ = "grades"
    # upsert key of batch grade assignment
    __table_args__ = (UniqueConstraint("student_id", "subject_id", name="uq_grades_student_subject"),)

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    grade = Column(Float, nullable=False)
    assignment = Column(String, nullable=True)
    comments = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = relationship("User", back_populates="grades")
    subject = relationship("Subject", back_populates="grades")
