"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(host="0.0.0.0", port=3000, log_level="debug")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000  # Used by ``swoop run`` when --port is omitted
    backlog: int = 2048
    keep_alive_timeout: float = 5.0
    access_log: bool = False

    # Logging (applied by the CLI only; the library never configures handlers)
    log_level: str = "info"

    # Static files
    static_cache: bool = True  # Default for App.static(cache=...)
    static_chunk_size: int = 64 * 1024
