import time
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from labstudy.db import get_db
from labstudy.deps.auth import get_current_user, require_role
from labstudy.models.base import utcnow
from labstudy.repositories.participant_repo import ParticipantRepository
from labstudy.schemas.participant import ParticipantCreate, ParticipantRead, ParticipantUpdate

router = APIRouter(prefix="/api/participants", tags=["participants"], dependencies=[Depends(get_current_user)])

def _blank_to_none(value):
    return None if value == "" else value

def next_external_id(repo: ParticipantRepository) -> str:
    """P-00001 style code from the participant count; epoch millis if that one is taken."""
    candidate = f"P-{repo.count() + 1:05d}"
    if repo.get_by_external_id(candidate):
        candidate = f"P-{int(time.time() * 1000)}"
    return candidate

@router.get("", response_model=list[ParticipantRead])
def list_participants(db: Session = Depends(get_db)):
    return ParticipantRepository(db).list()

@router.get("/{participant_id}", response_model=ParticipantRead)
def get_participant(participant_id: str, db: Session = Depends(get_db)):
    p = ParticipantRepository(db).get(participant_id)
    if not p:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return p

@router.post("", response_model=ParticipantRead, status_code=status.HTTP_201_CREATED)
def create_participant(payload: ParticipantCreate, db: Session = Depends(get_db)):
    if not payload.name and not payload.external_id:
        raise HTTPException(status_code=400, detail="Missing name or externalId")

    repo = ParticipantRepository(db)
    return repo.create(
        external_id=payload.external_id or next_external_id(repo),
        name=payload.name or None,
        email=payload.email or None,
        phone=payload.phone or None,
        notes=payload.notes or None,
    )

@router.put("/{participant_id}", response_model=ParticipantRead)
def update_participant(participant_id: str, payload: ParticipantUpdate, db: Session = Depends(get_db)):
    updates = {k: _blank_to_none(v) for k, v in payload.model_dump(exclude_unset=True).items()}
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "external_id" in updates and updates["external_id"] is None:
        raise HTTPException(status_code=400, detail="externalId cannot be empty")

    updates["updated_at"] = utcnow()
    p = ParticipantRepository(db).update(participant_id, updates)
    if not p:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return p

@router.delete("/{participant_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_role("admin"))])
def delete_participant(participant_id: str, db: Session = Depends(get_db)):
    # Sessions keep their participant_id and resolve it as "(deleted)"
    if not ParticipantRepository(db).delete(participant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
