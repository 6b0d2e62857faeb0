from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from gradebook.db.base import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    teacher = relationship("User", back_populates="owned_classes")
    subjects = relationship("Subject", back_populates="school_class", cascade="all, delete-orphan")
    enrollments = relationship("Enrollment", back_populates="school_class", cascade="all, delete-orphan")
    students = relationship("User", secondary="enrollments", viewonly=True, order_by="User.name")
