"""Aggregation services turning roster rows into view models.

The loaders are re-exported here for the rendering layer and the CLI.
"""

from .cabinet_service import CabinetService
from .career_service import CareerService
from .person_service import PersonDetailService
from .pole_service import PoleService
from .roster_service import RosterService
from .sheet_service import PersonSheetService

__all__ = [
    "CabinetService",
    "CareerService",
    "PersonDetailService",
    "PersonSheetService",
    "PoleService",
    "RosterService",
]
