"""Configuration from environment variables (.env)."""

import os
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Config:
    project_root: Path
    logs_dir: Path
    backend_url: str
    admin_email: str
    admin_password: str
    backend_timeout: float  # seconds, per upstream call
    token_ttl_hours: float  # backend tokens live 24h; refresh an hour early
    reauth_on_401: bool
    default_search_limit: int
    default_vector_threshold: float
    mcp_server_name: str
    mcp_server_version: str
    log_level: str
    log_to_file: bool

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        return cls(
            project_root=project_root,
            logs_dir=Path(os.getenv("LOGS_DIR", str(project_root / "logs"))),
            backend_url=os.getenv("BACKEND_URL", "http://192.168.37.1:3100").rstrip("/"),
            admin_email=os.getenv("ADMIN_EMAIL", "admin@ulbra.edu.br"),
            admin_password=os.getenv("ADMIN_PASSWORD", "123456"),
            backend_timeout=float(os.getenv("BACKEND_TIMEOUT", "10")),
            token_ttl_hours=float(os.getenv("TOKEN_TTL_HOURS", "23")),
            reauth_on_401=_env_bool("BACKEND_REAUTH_ON_401", False),
            default_search_limit=int(os.getenv("DEFAULT_SEARCH_LIMIT", "10")),
            default_vector_threshold=float(os.getenv("DEFAULT_VECTOR_THRESHOLD", "0.7")),
            mcp_server_name=os.getenv("MCP_SERVER_NAME", "ulbra-supply-mcp"),
            mcp_server_version=os.getenv("MCP_SERVER_VERSION", "1.0.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_to_file=_env_bool("LOG_TO_FILE", True),
        )

    def validate(self) -> list[str]:
        errors = []
        if not self.backend_url:
            errors.append("BACKEND_URL is empty")
        if not self.admin_email or not self.admin_password:
            errors.append("ADMIN_EMAIL and ADMIN_PASSWORD are required")
        if self.backend_timeout <= 0:
            errors.append(f"BACKEND_TIMEOUT must be positive, got {self.backend_timeout}")
        if self.token_ttl_hours <= 0:
            errors.append(f"TOKEN_TTL_HOURS must be positive, got {self.token_ttl_hours}")
        if self.default_search_limit < 1:
            errors.append(f"DEFAULT_SEARCH_LIMIT must be >= 1, got {self.default_search_limit}")
        if not 0.0 <= self.default_vector_threshold <= 1.0:
            errors.append(
                f"DEFAULT_VECTOR_THRESHOLD must be within [0, 1], got {self.default_vector_threshold}"
            )
        return errors


config = Config.load()
