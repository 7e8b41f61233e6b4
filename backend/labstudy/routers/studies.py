import re
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from labstudy.db import get_db
from labstudy.deps.auth import get_current_user, require_role
from labstudy.models.base import utcnow
from labstudy.repositories.study_repo import StudyRepository
from labstudy.schemas.study import StudyCreate, StudyRead, StudyUpdate

router = APIRouter(prefix="/api/studies", tags=["studies"], dependencies=[Depends(get_current_user)])

_NON_SLUG = re.compile(r"[^a-z0-9]+")

def slugify(value: str) -> str:
    return _NON_SLUG.sub("-", value.strip().lower()).strip("-")

def _clean(value: str | None) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None

def _clean_tags(tags: list[str] | None) -> list[str]:
    return [t.strip() for t in tags or [] if t and t.strip()]

@router.get("", response_model=list[StudyRead])
def list_studies(db: Session = Depends(get_db)):
    return StudyRepository(db).list()

@router.get("/{study_id}", response_model=StudyRead)
def get_study(study_id: str, db: Session = Depends(get_db)):
    s = StudyRepository(db).get(study_id)
    if not s:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return s

@router.post("", response_model=StudyRead, status_code=status.HTTP_201_CREATED)
def create_study(payload: StudyCreate, db: Session = Depends(get_db)):
    title = _clean(payload.title)
    if not title:
        raise HTTPException(status_code=400, detail="Missing title")

    slug = slugify(payload.slug if _clean(payload.slug) else title)
    return StudyRepository(db).create(
        title=title,
        slug=slug or None,
        description=_clean(payload.description),
        status=_clean(payload.status) or "draft",
        tags=_clean_tags(payload.tags),
    )

@router.put("/{study_id}", response_model=StudyRead)
def update_study(study_id: str, payload: StudyUpdate, db: Session = Depends(get_db)):
    raw = payload.model_dump(exclude_unset=True)
    if not raw:
        raise HTTPException(status_code=400, detail="No fields to update")

    updates = {}
    if "title" in raw:
        updates["title"] = _clean(raw["title"])
        if not updates["title"]:
            raise HTTPException(status_code=400, detail="Missing title")
    if "slug" in raw:
        updates["slug"] = slugify(raw["slug"] or "") or None
    if "description" in raw:
        updates["description"] = _clean(raw["description"])
    if "status" in raw:
        updates["status"] = _clean(raw["status"]) or "draft"
    if "tags" in raw:
        updates["tags"] = _clean_tags(raw["tags"])

    updates["updated_at"] = utcnow()
    s = StudyRepository(db).update(study_id, updates)
    if not s:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return s

@router.delete("/{study_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_role("admin"))])
def delete_study(study_id: str, db: Session = Depends(get_db)):
    # Sessions keep their study_id and resolve it as "(deleted)"
    if not StudyRepository(db).delete(study_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
