"""Pydantic schemas for catalog lookups."""
from pydantic import BaseModel, ConfigDict


class CourseInfo(BaseModel):
    id: int
    title: str
    image_src: str

    model_config = ConfigDict(from_attributes=True)


class ChallengeInfo(BaseModel):
    id: int
    course_id: int
    points: int
