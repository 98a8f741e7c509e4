"""Domain-specific configuration accessors."""
from .extractor import ExtractorConfig
from .logging import LoggingConfig
from .tangle import TangleConfig

__all__ = ["ExtractorConfig", "LoggingConfig", "TangleConfig"]
