"""
Configuration management for QR Tracker

Loads defaults, an optional JSON config file and environment overrides.
State lives in memory only, so there is no database section.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

ENV_PREFIX = "QR_TRACKER_"

DECODER_CHOICES = ("payload", "fixed")
GEOLOCATION_CHOICES = ("static", "unsupported")


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> Optional[bool]:
    value = _env(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    auto_reload: bool = False


@dataclass
class ScanConfig:
    """Scan workflow configuration."""

    high_accuracy: bool = True
    timeout_ms: int = 10_000  # Bounded wait for a position reading
    max_cache_age_ms: int = 60_000  # Oldest cached reading the provider may return

    # Token decoding
    decoder: str = "payload"  # "payload" or "fixed"
    demo_token: Optional[str] = None  # Token returned by the fixed decoder
    capture_delay_seconds: float = 0.0  # Simulated camera capture time

    # Fallback geolocation when the client does not report a position
    geolocation: str = "unsupported"  # "static" or "unsupported"
    static_latitude: float = -23.5505
    static_longitude: float = -46.6333


@dataclass
class QRConfig:
    """QR image rendering defaults."""

    size_px: int = 300
    margin_modules: int = 2
    dark_color: str = "#000000"
    light_color: str = "#FFFFFF"


@dataclass
class AppConfig:
    """Main application configuration."""

    app_name: str = "QR Tracker"
    version: str = "1.0.0"
    description: str = "Track physical objects by scanning their QR codes"

    # Features
    seed_demo_data: bool = False
    enable_cors: bool = True
    allowed_origins: List[str] = field(
        default_factory=lambda: ["http://127.0.0.1:8000", "http://localhost:8000"]
    )

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"


@dataclass
class TrackerConfig:
    """Complete configuration for QR Tracker."""

    app: AppConfig
    server: ServerConfig
    scan: ScanConfig
    qr: QRConfig

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "app": asdict(self.app),
            "server": asdict(self.server),
            "scan": asdict(self.scan),
            "qr": asdict(self.qr),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackerConfig":
        """Create from dictionary."""
        return cls(
            app=AppConfig(**data.get("app", {})),
            server=ServerConfig(**data.get("server", {})),
            scan=ScanConfig(**data.get("scan", {})),
            qr=QRConfig(**data.get("qr", {})),
        )


class ConfigManager:
    """Manages configuration loading, saving and environment overrides."""

    def __init__(self):
        self.config_file: Optional[Path] = None
        self.config: Optional[TrackerConfig] = None

    def get_config_file_path(self) -> Path:
        """Get the path for the config file."""
        override = _env("CONFIG_FILE")
        if override:
            return Path(override)
        return Path.cwd() / "data" / "config.json"

    def create_default_config(self) -> TrackerConfig:
        """Create default configuration."""
        return TrackerConfig(
            app=AppConfig(), server=ServerConfig(), scan=ScanConfig(), qr=QRConfig()
        )

    def apply_environment(self, config: TrackerConfig) -> TrackerConfig:
        """Apply QR_TRACKER_* environment overrides in place."""
        debug = _env_flag("DEBUG")
        if debug is not None:
            config.server.debug = debug
            config.app.log_level = "DEBUG" if debug else config.app.log_level

        log_to_file = _env_flag("LOG_TO_FILE")
        if log_to_file is not None:
            config.app.log_to_file = log_to_file
        if _env("LOG_DIR"):
            config.app.log_dir = _env("LOG_DIR")

        seed_demo = _env_flag("SEED_DEMO")
        if seed_demo is not None:
            config.app.seed_demo_data = seed_demo

        if _env("HOST"):
            config.server.host = _env("HOST")
        if _env("PORT"):
            config.server.port = int(_env("PORT"))

        if _env("SCAN_TIMEOUT_MS"):
            config.scan.timeout_ms = int(_env("SCAN_TIMEOUT_MS"))
        if _env("DECODER"):
            config.scan.decoder = _env("DECODER").strip().lower()
        if _env("DEMO_TOKEN"):
            config.scan.demo_token = _env("DEMO_TOKEN")
        if _env("GEOLOCATION"):
            config.scan.geolocation = _env("GEOLOCATION").strip().lower()
        if _env("STATIC_LATITUDE"):
            config.scan.static_latitude = float(_env("STATIC_LATITUDE"))
        if _env("STATIC_LONGITUDE"):
            config.scan.static_longitude = float(_env("STATIC_LONGITUDE"))

        return config

    def load_config(self) -> TrackerConfig:
        """Load configuration from file or create default."""
        self.config_file = self.get_config_file_path()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                config = TrackerConfig.from_dict(data)
                logging.info(f"Loaded configuration from {self.config_file}")
            except (OSError, ValueError, TypeError) as e:
                logging.warning(f"Failed to load config from {self.config_file}: {e}")
                logging.info("Creating default configuration")
                config = self.create_default_config()
        else:
            config = self.create_default_config()

        self.config = self.apply_environment(config)
        return self.config

    def save_config(self, config: Optional[TrackerConfig] = None) -> bool:
        """Save configuration to file."""
        if config is None:
            config = self.config

        if config is None:
            logging.error("No configuration to save")
            return False

        if self.config_file is None:
            self.config_file = self.get_config_file_path()

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            logging.error(f"Failed to save config to {self.config_file}: {e}")
            return False

        logging.info(f"Saved configuration to {self.config_file}")
        return True

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        if self.config is None:
            self.load_config()

        issues = []
        scan = self.config.scan

        if scan.timeout_ms <= 0:
            issues.append(f"Scan timeout must be positive, got {scan.timeout_ms}")
        if scan.max_cache_age_ms < 0:
            issues.append(f"Max cache age must not be negative, got {scan.max_cache_age_ms}")
        if scan.decoder not in DECODER_CHOICES:
            issues.append(f"Unknown decoder '{scan.decoder}', expected one of {DECODER_CHOICES}")
        if scan.decoder == "fixed" and not scan.demo_token:
            issues.append("The fixed decoder needs a demo_token")
        if scan.geolocation not in GEOLOCATION_CHOICES:
            issues.append(
                f"Unknown geolocation provider '{scan.geolocation}', "
                f"expected one of {GEOLOCATION_CHOICES}"
            )
        if not -90.0 <= scan.static_latitude <= 90.0:
            issues.append(f"Static latitude out of range: {scan.static_latitude}")
        if not -180.0 <= scan.static_longitude <= 180.0:
            issues.append(f"Static longitude out of range: {scan.static_longitude}")

        if self.config.qr.size_px <= 0:
            issues.append(f"QR size must be positive, got {self.config.qr.size_px}")
        if self.config.qr.margin_modules < 0:
            issues.append(f"QR margin must not be negative, got {self.config.qr.margin_modules}")

        if not 0 < self.config.server.port < 65536:
            issues.append(f"Invalid server port: {self.config.server.port}")

        return issues


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> TrackerConfig:
    """Get the current configuration, loading it on first use."""
    if config_manager.config is None:
        config_manager.load_config()
    return config_manager.config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    config_manager.config = None
    config_manager.config_file = None
