from .models import DEFAULT_CONTEXT_LIMIT, MODEL_CONTEXT_LIMITS, ModelCatalog
from .settings import ContextSettings

__all__ = [
    "DEFAULT_CONTEXT_LIMIT",
    "MODEL_CONTEXT_LIMITS",
    "ModelCatalog",
    "ContextSettings",
]
