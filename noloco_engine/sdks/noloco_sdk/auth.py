"""
Credential representation for the Noloco API.

Noloco authenticates every request with two keys: the account key and the
app key. The workflow host owns and stores them; the client only receives the
header mapping produced here.
"""

from typing import Dict

from pydantic import BaseModel, Field


class NolocoCredentials(BaseModel):
    """Account + app API keys copied from the Noloco integration settings page."""

    account_key: str = Field(..., min_length=1, description="Account API Key")
    app_key: str = Field(..., min_length=1, description="App API Key")

    def auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.account_key}",
            "X-Noloco-App-Token": f"Bearer {self.app_key}",
        }
