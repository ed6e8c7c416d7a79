"""Documentation expert MCP service."""

from .config import ExpertConfig
from .service import ExpertService

__all__ = ["ExpertConfig", "ExpertService"]
