"""Environment-backed settings.

Reads defaults for the SAP service address, demo credentials, the proxy
gateway address and logging from environment variables. A ``.env`` file at
the project root is loaded first if it exists.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Load .env file if it exists
from dotenv import load_dotenv
env_path = Path(__file__).resolve().parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from connectors.sap_sales_order.so_auth import Credentials


DEFAULT_SAP_SALES_ORDER_API = (
    "https://my418390-api.s4hana.cloud.sap/sap/opu/odata/sap/API_SALES_ORDER_SRV"
)
DEFAULT_PROXY_BASE_URL = "http://localhost:8000"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Startup configuration.

    Attributes:
        sap_api_url: Base address of the SAP sales order OData service
        sap_username: Initial username offered to the credential form
        sap_password: Initial password offered to the credential form
        proxy_base_url: Address of the proxy gateway the client calls
        log_level: Logging level name
        log_json: Emit JSON log lines instead of human-readable ones
    """
    sap_api_url: str = DEFAULT_SAP_SALES_ORDER_API
    sap_username: str = ""
    sap_password: str = field(default="", repr=False)
    proxy_base_url: str = DEFAULT_PROXY_BASE_URL
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            sap_api_url=os.getenv("SAP_SALES_ORDER_API", DEFAULT_SAP_SALES_ORDER_API),
            sap_username=os.getenv("SAP_USERNAME", ""),
            sap_password=os.getenv("SAP_PASSWORD", ""),
            proxy_base_url=os.getenv("SAP_PROXY_BASE_URL", DEFAULT_PROXY_BASE_URL),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_json=os.getenv("LOG_JSON", "false").strip().lower() in _TRUTHY,
        )

    @property
    def logging_level(self) -> int:
        """Numeric logging level (falls back to INFO for unknown names)."""
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO

    def default_credentials(self) -> Optional[Credentials]:
        """Credentials from the environment, or None unless all three are set."""
        if not (self.sap_username and self.sap_password and self.sap_api_url):
            return None
        return Credentials(
            username=self.sap_username,
            password=self.sap_password,
            api_url=self.sap_api_url,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings, reading the environment once."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
