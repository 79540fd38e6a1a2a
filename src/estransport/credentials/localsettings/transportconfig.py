import logging
from typing import Any, List

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class HostConfig(BaseModel):
    """One search node, tried in configured order."""

    host: str = Field(..., min_length=1, description="Host name or base URL")
    port: int = Field(..., ge=1, le=65535, description="TCP port")

    @property
    def base_url(self) -> str:
        host = self.host.rstrip("/")
        if "://" not in host:
            host = f"http://{host}"
        return f"{host}:{self.port}"


class TransportConfig(BaseSettings):
    """
    Transport configuration.
    Loads from environment variables with TRANSPORT__ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSPORT__",
        env_file=[".env"],
        extra="ignore",
        case_sensitive=False,
    )

    # Core connection settings
    timeout: int = Field(default=30, ge=1, description="Per host attempt timeout in seconds")
    flush_response: bool = True
    hosts: List[HostConfig] = Field(default_factory=list)
    max_hosts: int = Field(default=8, ge=1)

    # Capacity limits
    response_buffer_len: int = Field(default=1024 * 1024, ge=1)
    max_num_hits: int = Field(default=100, ge=0)
    error_len: int = 256
    index_len: int = 32
    type_len: int = 32
    id_len: int = 64
    source_len: int = 8192
    session_id_len: int = Field(default=32, ge=1)

    @field_validator("hosts", mode="before")
    @classmethod
    def drop_incomplete_hosts(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        hosts = []
        for entry in value:
            if isinstance(entry, dict) and (not entry.get("host") or entry.get("port") is None):
                logger.warning("Skipping host entry without host/port: %s", entry)
                continue
            hosts.append(entry)
        return hosts

    @model_validator(mode="after")
    def check_hosts(self) -> "TransportConfig":
        if not self.hosts:
            raise ValueError("Missing 'hosts' in transport configuration")
        if len(self.hosts) > self.max_hosts:
            logger.warning(
                "Ignoring %s host(s) beyond max_hosts=%s",
                len(self.hosts) - self.max_hosts, self.max_hosts,
            )
            self.hosts = self.hosts[: self.max_hosts]
        return self
