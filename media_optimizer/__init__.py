"""Media Optimizer - batch image shrinking with transactional backups."""

__version__ = "1.0.0"
__author__ = "Media Tool Team"

# Import key classes for convenient top-level access
from .config import EligibilityConfig, Settings, TransformConfig, load_settings
from .errors import ConfigurationError, MediaOptimizerError, MissingDirectoryError
from .commands import RunCommand
from .pipeline import Mode, ResultAggregator, Scheduler, build_mode
from .scanning import EligibilityFilter, FileDiscovery
from .transform import PillowTransformer, TransformResult
from .models import AggregateResult, Candidate, TransactionOutcome, TransactionState

__all__ = [
    # Configuration
    'EligibilityConfig',
    'Settings',
    'TransformConfig',
    'load_settings',

    # Errors
    'ConfigurationError',
    'MediaOptimizerError',
    'MissingDirectoryError',

    # Core classes
    'RunCommand',
    'Mode',
    'ResultAggregator',
    'Scheduler',
    'build_mode',
    'EligibilityFilter',
    'FileDiscovery',
    'PillowTransformer',
    'TransformResult',

    # Data models
    'AggregateResult',
    'Candidate',
    'TransactionOutcome',
    'TransactionState',

    # Package metadata
    '__version__',
    '__author__'
]
