"""
Configuration settings for the subgraph data layer

Loads environment variables and provides client defaults.
"""
import os
from typing import Optional
from dotenv import load_dotenv

from .constants import DEFAULT_CHAIN_ID, DEFAULT_LIMIT, MAX_SAFE_LIMIT, NETWORK_PRESETS

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Data layer settings"""

    # Subgraph endpoint
    SUBGRAPH_URL: str = os.getenv("SUBGRAPH_URL", "")
    SUBGRAPH_CHAIN_ID: int = int(os.getenv("SUBGRAPH_CHAIN_ID", DEFAULT_CHAIN_ID))
    SUBGRAPH_TIMEOUT: float = float(os.getenv("SUBGRAPH_TIMEOUT", 30.0))

    # Query limits
    QUERY_DEFAULT_LIMIT: int = int(os.getenv("QUERY_DEFAULT_LIMIT", DEFAULT_LIMIT))
    QUERY_MAX_LIMIT: int = int(os.getenv("QUERY_MAX_LIMIT", MAX_SAFE_LIMIT))

    # Request deduplication
    SUBGRAPH_DEDUPE_REQUESTS: bool = os.getenv("SUBGRAPH_DEDUPE_REQUESTS", "True").lower() == "true"
    SUBGRAPH_MAX_IN_FLIGHT: int = int(os.getenv("SUBGRAPH_MAX_IN_FLIGHT", 100))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_JSON: bool = os.getenv("LOG_JSON", "False").lower() == "true"

    def get_subgraph_url(self, chain_id: Optional[int] = None) -> str:
        """Get subgraph URL, preferring the SUBGRAPH_URL override"""
        if self.SUBGRAPH_URL:
            return self.SUBGRAPH_URL
        preset = NETWORK_PRESETS.get(chain_id or self.SUBGRAPH_CHAIN_ID)
        return preset['subgraph_url'] if preset else ""


# Create global settings instance
settings = Settings()
