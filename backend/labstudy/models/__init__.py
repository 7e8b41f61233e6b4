from labstudy.models.user import User, UserRole
from labstudy.models.participant import Participant
from labstudy.models.study import Study
from labstudy.models.session import StudySession

__all__ = ["User", "UserRole", "Participant", "Study", "StudySession"]
