from datetime import datetime
from typing import Annotated
from pydantic import AfterValidator
from labstudy.models.base import as_utc

# Timestamps always leave the API as aware UTC, whatever the backend returned
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]
