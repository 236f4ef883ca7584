"""
=============================================================================
CONFIGURATION
=============================================================================

Two small dataclasses and a logging helper:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   RequestFactoryConfig   how a ServerRequest URI is derived          │
    │                          (forced scheme / host / port)               │
    │                                                                      │
    │   UploadConfig           where uploads go and with which modes       │
    │                          → to_options() → UploadOptions              │
    │                                                                      │
    │   setup_logging()        basicConfig + package logger level          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Both configs can be built in code or from the environment, and both
validate eagerly:

    config = UploadConfig.from_env()
    config.validate()
    setup_logging(config.log_level)
    uploaded_file.move_to("avatar.png", config.to_options())

=============================================================================
FORCED URI PARTS
=============================================================================

Behind a reverse proxy the WSGI environ describes the proxy hop, not the
public URL. Forcing a part replaces what the environ says:

    HTTPMESSAGE_FORCED_SCHEME=https
    HTTPMESSAGE_FORCED_HOST=www.example.com
    HTTPMESSAGE_FORCED_PORT=443

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .uploading.filesystem import check_mode
from .uploading.options import UploadOptions


@dataclass
class RequestFactoryConfig:
    """
    Overrides used by the factories when building a request URI.

    Empty values mean "not forced": the environ decides.
    """

    forced_scheme: Optional[str] = None
    forced_host: Optional[str] = None
    forced_port: Optional[int] = None

    default_port: int = 80
    """Port used when the environ has no SERVER_PORT."""

    @classmethod
    def from_env(cls) -> "RequestFactoryConfig":
        """
        Create configuration from environment variables.

            HTTPMESSAGE_FORCED_SCHEME   e.g. https
            HTTPMESSAGE_FORCED_HOST     e.g. www.example.com
            HTTPMESSAGE_FORCED_PORT     e.g. 443
        """
        port = os.getenv("HTTPMESSAGE_FORCED_PORT")
        return cls(
            forced_scheme=os.getenv("HTTPMESSAGE_FORCED_SCHEME") or None,
            forced_host=os.getenv("HTTPMESSAGE_FORCED_HOST") or None,
            forced_port=int(port) if port else None,
        )

    def validate(self) -> None:
        for name in ("forced_scheme", "forced_host"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, str) or not value):
                raise ValueError(f"{name} must be a non-empty string or None")

        if self.forced_port is not None:
            if isinstance(self.forced_port, bool) or not isinstance(self.forced_port, int):
                raise ValueError(f"Invalid forced_port: {self.forced_port!r}. Must be an integer.")
            if not 0 < self.forced_port < 65536:
                raise ValueError(f"Invalid forced_port: {self.forced_port}. Must be 1-65535.")

        if not 0 < self.default_port < 65536:
            raise ValueError(f"Invalid default_port: {self.default_port}. Must be 1-65535.")


@dataclass
class UploadConfig:
    """Settings for the default upload pipeline."""

    target_directory: Optional[str] = None
    dir_permissions: int = 0o700
    file_permissions: int = 0o600
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "UploadConfig":
        """
        Create configuration from environment variables.

            HTTPMESSAGE_UPLOAD_DIR          target directory
            HTTPMESSAGE_UPLOAD_DIR_MODE     octal, e.g. 750
            HTTPMESSAGE_UPLOAD_FILE_MODE    octal, e.g. 640
            HTTPMESSAGE_LOG_LEVEL           default INFO
        """
        return cls(
            target_directory=os.getenv("HTTPMESSAGE_UPLOAD_DIR") or None,
            dir_permissions=int(os.getenv("HTTPMESSAGE_UPLOAD_DIR_MODE", "700"), 8),
            file_permissions=int(os.getenv("HTTPMESSAGE_UPLOAD_FILE_MODE", "600"), 8),
            log_level=os.getenv("HTTPMESSAGE_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        if self.target_directory is not None and not self.target_directory:
            raise ValueError("target_directory must not be empty")
        check_mode(self.dir_permissions, "directory")
        check_mode(self.file_permissions, "file")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log_level: {self.log_level}")

    def to_options(self) -> UploadOptions:
        """Options bag for UploadedFile.move_to() or a strategy."""
        options = UploadOptions({
            "dir_permissions": self.dir_permissions,
            "file_permissions": self.file_permissions,
        })
        if self.target_directory:
            options["target_directory"] = self.target_directory
        return options


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging and the ``httpmessage`` logger level."""
    numeric = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpmessage").setLevel(numeric)
