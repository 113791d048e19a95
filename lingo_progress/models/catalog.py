"""Catalog models: courses -> units -> lessons -> challenges. Read-only to the engine."""
from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from lingo_progress.db.session import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    image_src = Column(String(255), nullable=False)

    units = relationship("Unit", back_populates="course", order_by="Unit.order")


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    order = Column(Integer, nullable=False)

    course = relationship("Course", back_populates="units")
    lessons = relationship("Lesson", back_populates="unit", order_by="Lesson.order")


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False)

    unit = relationship("Unit", back_populates="lessons")
    challenges = relationship("Challenge", back_populates="lesson", order_by="Challenge.order")


class Challenge(Base):
    __tablename__ = "challenges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(32), nullable=False)  # SELECT | ASSIST
    question = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)
    points = Column(Integer, nullable=False, default=10)  # reward for the first correct answer

    lesson = relationship("Lesson", back_populates="challenges")
