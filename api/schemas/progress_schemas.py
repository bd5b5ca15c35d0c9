"""
Curriculum progress schemas (tutor progress modal and student progress card).
"""

from pydantic import BaseModel
from typing import Optional, Union


class AppendChapterRequest(BaseModel):
    chapter_number: Union[int, str]
    chapter_name: str


class ProgressResponse(BaseModel):
    """Ordered (oldest first) chapters completed by a student in one subject."""
    student_id: str
    subject: str
    completed_chapters: list[str]
    latest_chapter: Optional[str] = None
