"""
External API SDKs used by the workflow nodes.
"""

from .noloco_sdk import NolocoClient, NolocoCredentials, NolocoError

__all__ = ["NolocoClient", "NolocoCredentials", "NolocoError"]
