from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from labstudy.db import get_db
from labstudy.deps.auth import get_actor, get_current_user
from labstudy.errors import NotFoundError
from labstudy.repositories.participant_repo import ParticipantRepository
from labstudy.repositories.session_repo import SessionRepository
from labstudy.repositories.study_repo import StudyRepository
from labstudy.schemas.session import ParticipantRef, SessionCreate, SessionRead, SessionUpdate, StudyRef
from labstudy.services.references import ReferenceResolver
from labstudy.services.session_lifecycle import SessionLifecycleManager

router = APIRouter(prefix="/api/sessions", tags=["sessions"], dependencies=[Depends(get_current_user)])

def get_resolver(db: Session = Depends(get_db)) -> ReferenceResolver:
    return ReferenceResolver(StudyRepository(db), ParticipantRepository(db))

def get_lifecycle(db: Session = Depends(get_db)) -> SessionLifecycleManager:
    return SessionLifecycleManager(SessionRepository(db))

def to_read(view: dict) -> SessionRead:
    study, participant = view["study"], view["participant"]
    return SessionRead.model_validate(view["session"]).model_copy(update={
        "study": StudyRef(**study) if study else None,
        "participant": ParticipantRef(**participant) if participant else None,
    })

@router.get("", response_model=list[SessionRead])
def list_sessions(db: Session = Depends(get_db), resolver: ReferenceResolver = Depends(get_resolver)):
    return [to_read(v) for v in resolver.resolve(SessionRepository(db).list())]

@router.get("/{session_id}", response_model=SessionRead)
def get_session(session_id: str, db: Session = Depends(get_db), resolver: ReferenceResolver = Depends(get_resolver)):
    sess = SessionRepository(db).get(session_id)
    if not sess:
        raise NotFoundError("Session not found")
    return to_read(resolver.resolve_one(sess))

@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreate,
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle),
    resolver: ReferenceResolver = Depends(get_resolver),
    actor: str = Depends(get_actor),
):
    sess = lifecycle.create_session(
        study_id=payload.study_id,
        participant_id=payload.participant_id,
        started_at=payload.started_at,
        notes=payload.notes,
        actor=actor,
    )
    return to_read(resolver.resolve_one(sess))

@router.put("/{session_id}", response_model=SessionRead)
def update_session(
    session_id: str,
    payload: SessionUpdate,
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle),
    resolver: ReferenceResolver = Depends(get_resolver),
    actor: str = Depends(get_actor),
):
    # exclude_unset keeps explicit nulls ("clear ended_at") apart from absent keys
    proposed = payload.model_dump(exclude_unset=True)
    sess = lifecycle.update_session(session_id, proposed, actor)
    return to_read(resolver.resolve_one(sess))
