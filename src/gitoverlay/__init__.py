"""Public interface for gitoverlay."""

from .errors import GitOverlayError, ParseError, ProcessFailure, ResolveFailure
from .service import ServiceSettings, StatusService
from .status_codes import DisplayStatus, StatusCategory, classify, display_status

__version__ = "0.1.0"
__all__ = [
    "DisplayStatus",
    "GitOverlayError",
    "ParseError",
    "ProcessFailure",
    "ResolveFailure",
    "ServiceSettings",
    "StatusCategory",
    "StatusService",
    "classify",
    "display_status",
    "__version__",
]
