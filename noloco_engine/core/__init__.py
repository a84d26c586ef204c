from .config import Settings, get_settings
from .context import NodeExecutionContext

__all__ = ["Settings", "get_settings", "NodeExecutionContext"]
