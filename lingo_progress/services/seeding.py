"""Seed the default course catalog if the courses table is empty."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_progress.models.catalog import Challenge, Course, Lesson, Unit

logger = logging.getLogger(__name__)

COURSES = [
    {"id": 1, "title": "Spanish", "image_src": "/es-flag.svg"},
    {"id": 2, "title": "French", "image_src": "/fr-flag.svg"},
    {"id": 3, "title": "Croatian", "image_src": "/cr-flag.svg"},
    {"id": 4, "title": "Italian", "image_src": "/it-flag.svg"},
]

# (course_id, unit title, unit description, lesson titles, challenge questions per lesson)
STARTER_UNITS = [
    (
        1,
        "Unit 1",
        "Learn the basics of Spanish",
        ["Nouns", "Verbs"],
        ['Which one of these is "the man"?', '"the woman"', 'Which one of these is "the boy"?'],
    ),
]


async def seed_catalog(db: AsyncSession, challenge_points: int = 10) -> None:
    count = await db.scalar(select(func.count(Course.id)))
    if count:
        return

    db.add_all(Course(**c) for c in COURSES)
    for course_id, unit_title, description, lesson_titles, questions in STARTER_UNITS:
        unit = Unit(course_id=course_id, title=unit_title, description=description, order=1)
        for lesson_order, lesson_title in enumerate(lesson_titles, start=1):
            lesson = Lesson(title=lesson_title, order=lesson_order)
            lesson.challenges = [
                Challenge(
                    type="ASSIST" if question.startswith('"') else "SELECT",
                    question=question,
                    order=order,
                    points=challenge_points,
                )
                for order, question in enumerate(questions, start=1)
            ]
            unit.lessons.append(lesson)
        db.add(unit)

    await db.commit()
    logger.info(f"Seeded {len(COURSES)} courses")
