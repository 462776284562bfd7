from lil.services.resolution import ResolutionService, RedirectMode, Hit, Miss
from lil.services.management import ManagementFacade


__all__ = [
    'ResolutionService',
    'RedirectMode',
    'Hit',
    'Miss',
    'ManagementFacade',
]
