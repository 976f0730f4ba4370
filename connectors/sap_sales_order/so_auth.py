"""SAP Sales Order credentials.

Holds the user-supplied Basic-auth credentials for the SAP OData service.
Credentials live only in memory for the duration of a session.
"""

import base64
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class Credentials:
    """Basic-auth credentials for one SAP system.

    Attributes:
        username: SAP communication user
        password: Password for the communication user
        api_url: Base address of the sales order OData service
    """
    username: str
    password: str = field(repr=False)
    api_url: str

    @property
    def authorization_header(self) -> str:
        """Get the Authorization header value."""
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return f"Basic {base64.b64encode(raw).decode('ascii')}"

    def as_query_params(self) -> Dict[str, str]:
        """Gateway query-parameter form."""
        return {
            "username": self.username,
            "password": self.password,
            "apiUrl": self.api_url,
        }

    def as_request_body(self) -> Dict[str, str]:
        """Gateway JSON body form (same keys as the query form)."""
        return self.as_query_params()


class CredentialStore:
    """Holds at most one active credential set.

    An empty store is the normal unauthenticated (demo) state, not an error.
    Values are not validated here; the credential form rejects empty fields.

    Usage:
        store = CredentialStore()
        store.set_credentials("SALES_USER", "secret", "https://host/sap/opu/odata/sap/API_SALES_ORDER_SRV")
        if store.has_credentials():
            creds = store.current
    """

    def __init__(self, credentials: Optional[Credentials] = None):
        self._credentials: Optional[Credentials] = credentials

    @property
    def current(self) -> Optional[Credentials]:
        """The active credential set, or None."""
        return self._credentials

    def set_credentials(self, username: str, password: str, api_url: str) -> Credentials:
        """Replace any existing credential set."""
        self._credentials = Credentials(username=username, password=password, api_url=api_url)
        return self._credentials

    def clear_credentials(self) -> None:
        """Drop the active credential set. Safe to call when already empty."""
        self._credentials = None

    def has_credentials(self) -> bool:
        return self._credentials is not None
