from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from gradebook.db.base import Base


class Enrollment(Base):
    __tablename__ = "enrollments"
    # a student belongs to at most one class system-wide
    __table_args__ = (UniqueConstraint("student_id", name="uq_enrollments_student"),)

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    student = relationship("User", back_populates="enrollment")
    school_class = relationship("SchoolClass", back_populates="enrollments")
