"""mdpreview configuration.

PreviewConfig is the central configuration object, frozen after creation.
"""

import ipaddress
from dataclasses import dataclass, field
from pathlib import Path

from mdpreview._errors import ConfigError, StartupError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_POLL_INTERVAL = 0.1


@dataclass(frozen=True, slots=True)
class PreviewConfig:
    """Configuration for a preview session.

    Attributes:
        file: Path to the Markdown file to watch.
              Always resolved to an absolute path on construction.
        host: Bind address (an IP literal).
        port: Bind port.
        poll_interval: Seconds between modification-time checks.
        open_browser: Open the default browser once the server is up.
        plugins: Patitas plugins enabled for rendering.

    """

    file: Path = field(default_factory=lambda: Path("README.md"))
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    open_browser: bool = True
    plugins: tuple[str, ...] = ("table",)

    def __post_init__(self) -> None:
        if not isinstance(self.file, Path):
            object.__setattr__(self, "file", Path(self.file))
        if not self.file.is_absolute():
            object.__setattr__(self, "file", self.file.resolve())
        if not isinstance(self.plugins, tuple):
            object.__setattr__(self, "plugins", tuple(self.plugins))

    @property
    def filename(self) -> str:
        """Display name of the watched file."""
        return self.file.name

    @property
    def base_dir(self) -> Path:
        """Directory containing the watched file."""
        return self.file.parent

    @property
    def url(self) -> str:
        """Address the preview is served on."""
        host = self.host
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    def validate(self) -> None:
        """Check the configuration before any server is started.

        Raises:
            StartupError: The file does not exist, or host/port are invalid.
            ConfigError: The poll interval is not a positive number.

        """
        try:
            ipaddress.ip_address(self.host)
        except ValueError as exc:
            msg = f"could not parse ip/port: {self.host!r} is not an IP address"
            raise StartupError(msg) from exc

        if isinstance(self.port, bool) or not isinstance(self.port, int):
            msg = f"could not parse ip/port: port {self.port!r} is not an integer"
            raise StartupError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"could not parse ip/port: port {self.port} out of range"
            raise StartupError(msg)

        if not self.poll_interval > 0:
            msg = f"poll_interval must be positive, got {self.poll_interval!r}"
            raise ConfigError(msg)

        if not self.file.is_file():
            msg = f"file does not exist: {self.file}"
            raise StartupError(msg)
