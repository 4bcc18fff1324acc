from formintake.db.base import Base
from formintake.models.submission import Complaint, JobApplication

__all__ = [
    "Base",
    "Complaint",
    "JobApplication",
]
