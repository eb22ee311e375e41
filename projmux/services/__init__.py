"""
Service layer for projmux.

Contains business logic that orchestrates domain objects and infrastructure:
- Resolver: Flattening project files into a tagged project list
- ProjectService: Loading, filtering, scanning, reporting and importing
- SessionService: Opening, scratch, kill and home sessions

Services are the primary API for commands to use.
They handle coordination between infrastructure and domain layers.
"""

from .resolver import Resolver
from .project_service import ConfigChange, ProjectReport, ProjectService
from .session_service import SessionService

__all__ = [
    'Resolver',
    'ProjectService',
    'ProjectReport',
    'ConfigChange',
    'SessionService',
]
