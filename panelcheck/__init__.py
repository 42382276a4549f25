"""Panel Check package"""

from .patterns import VERSION
from .models import AccountProfile, FrequencyTable, LogWindow, Quota, Section
from .exceptions import PanelCheckError, ResolutionError, UsageError
from .resolver import IdentityResolver
from .analyzer import HealthCheck
from .output import print_health_report, print_profile

__all__ = [
    'VERSION', 'AccountProfile', 'FrequencyTable', 'LogWindow', 'Quota', 'Section',
    'PanelCheckError', 'ResolutionError', 'UsageError',
    'IdentityResolver', 'HealthCheck', 'print_health_report', 'print_profile',
]
