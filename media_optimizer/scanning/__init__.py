"""Scanning and filtering modules for the Media Optimizer."""

from .discovery import FileDiscovery, discover_files, parse_extensions
from .eligibility import Eligibility, EligibilityFilter, is_eligible

__all__ = [
    'FileDiscovery',
    'discover_files',
    'parse_extensions',
    'Eligibility',
    'EligibilityFilter',
    'is_eligible',
]
