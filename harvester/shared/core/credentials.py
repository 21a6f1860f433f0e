"""
Typed Credential Classes
Keeps provider credentials out of plugin signatures and ensures strict typing.
"""
from pydantic import BaseModel, SecretStr
from typing import Literal, Optional

AUTH_SECRET = "secret"
AUTH_APPLICATION_DEFAULT = "application_default"


class CloudCredentials(BaseModel):
    """Base class for all cloud credentials."""
    pass


class GCPCredentials(CloudCredentials):
    """GCP Service Account or Application Default Credentials."""
    service_account_json: Optional[SecretStr] = None
    auth_method: Literal["secret", "application_default"] = AUTH_SECRET
