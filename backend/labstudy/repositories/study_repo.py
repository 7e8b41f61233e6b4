from __future__ import annotations
from labstudy.models import Study
from labstudy.repositories.base import BaseRepository

class StudyRepository(BaseRepository[Study]):
    model = Study

    def create(self, *, title: str, slug: str | None, description: str | None,
               status: str, tags: list[str]) -> Study:
        s = Study(title=title, slug=slug, description=description, status=status, tags=tags)
        return self.add_and_refresh(s)
