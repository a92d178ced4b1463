from .service import OptimizerService, get_optimizer_service
from .models import BatchResult, EncodeRequest, EncodeResult, OptimizeSettings, OutputFormat, RenameMode

__all__ = [
    "OptimizerService",
    "get_optimizer_service",
    "BatchResult",
    "EncodeRequest",
    "EncodeResult",
    "OptimizeSettings",
    "OutputFormat",
    "RenameMode",
]
