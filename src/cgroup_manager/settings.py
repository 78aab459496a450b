"""Configuration of a reconciliation pass."""

from __future__ import annotations

import logging
import os
import socket
from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def short_hostname() -> str:
    """Return the local node name without its domain suffix."""
    return socket.gethostname().split(".", 1)[0]


class Settings(BaseSettings):
    """
    Everything a pass needs to know about the host, constructed once at startup.

    Values can be overridden through ``CGROUP_MANAGER_*`` environment variables
    or an env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CGROUP_MANAGER_",
        extra="ignore",
    )

    controller_root: str = Field(default="/sys/fs/cgroup/cpu")
    membership_file: str = Field(default="tasks")

    group_prefix: str = Field(default="was.jvm")
    security_suffix: str = Field(default="sec_service")
    default_suffix: str = Field(default="default")
    security_marker: str = Field(default="sec_service")

    user: str = Field(default="wasadmin")
    host: str = Field(default_factory=short_hostname)

    log_dir: str = Field(default="/var/log/cgroup_manager")
    log_retention_days: int = Field(default=30, ge=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    @computed_field
    @property
    def security_group(self) -> str:
        return f"{self.group_prefix}.{self.security_suffix}"

    @computed_field
    @property
    def default_group(self) -> str:
        return f"{self.group_prefix}.{self.default_suffix}"

    @property
    def security_group_path(self) -> Path:
        return Path(self.controller_root) / self.security_group

    @property
    def default_group_path(self) -> Path:
        return Path(self.controller_root) / self.default_group

    @property
    def root_membership_path(self) -> Path:
        return Path(self.controller_root) / self.membership_file

    def membership_path(self, group: str) -> Path:
        """Path of the membership file of a child cgroup."""
        return Path(self.controller_root) / group / self.membership_file

    @classmethod
    def load(cls) -> Settings:
        env_file = ".env"
        if "CGROUP_MANAGER_ENVFILE" in os.environ:
            env_file = os.environ["CGROUP_MANAGER_ENVFILE"]
            if not Path(env_file).exists():
                raise FileNotFoundError(f"Settings.load: could not find {env_file=}")

        logger.debug(f"Settings.load: loading {env_file=}")
        return cls(_env_file=env_file)
