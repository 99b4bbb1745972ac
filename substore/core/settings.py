from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_FLOW_USER_AGENT = "Quantumult%20X/1.0.30 (iPhone14,2; iOS 15.6)"

@dataclass(frozen=True)
class Settings:
    # Storage
    data_path: str = os.environ.get("SUBSTORE_DATA_PATH", "sub-store.json")

    # Logging
    log_level: str = os.environ.get("SUBSTORE_LOG_LEVEL", "INFO")
    log_file: str = os.environ.get("SUBSTORE_LOG_FILE", "")

    # Remote flow headers
    flow_timeout_seconds: float = float(os.environ.get("SUBSTORE_FLOW_TIMEOUT_SECONDS", "10"))
    flow_user_agent: str = os.environ.get("SUBSTORE_FLOW_USER_AGENT", DEFAULT_FLOW_USER_AGENT)

    # HTTP
    cors_origins: str = os.environ.get("SUBSTORE_CORS_ORIGINS", "*")
    host: str = os.environ.get("SUBSTORE_HOST", "0.0.0.0")
    port: int = int(os.environ.get("SUBSTORE_PORT", "3000"))

    metrics_enabled: bool = os.environ.get("METRICS_ENABLED", "1") not in ("0", "false", "False")

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]


S = Settings()
