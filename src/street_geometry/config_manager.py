"""
Configuration manager for resolver settings.

Loads resolver configuration from YAML files, validates settings,
and provides environment variable substitution.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import ConfigurationError
from .geometry.intersection import BUFFER_DISTANCE_M, NEAREST_POINT_MAX_M
from .geometry.section import MAX_STITCH_SEGMENTS, SNAP_MAX_M, STITCH_REACH_M
from .geocoders import nominatim
from .overpass import client as overpass_client
from .utils.throttle import DEFAULT_DELAY_S

PROVIDERS = ("live", "fixture")

ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


@dataclass
class ResolverConfig:
    """Validated resolver configuration."""
    locality: str = "bg.sofia"
    provider: str = "live"
    overpass_instances: Tuple[str, ...] = overpass_client.DEFAULT_INSTANCES
    overpass_timeout_s: float = overpass_client.DEFAULT_TIMEOUT_S
    user_agent: str = overpass_client.DEFAULT_USER_AGENT
    nominatim_url: str = nominatim.DEFAULT_URL
    nominatim_timeout_s: float = nominatim.DEFAULT_TIMEOUT_S
    request_delay_s: float = DEFAULT_DELAY_S
    buffer_m: float = BUFFER_DISTANCE_M
    nearest_max_m: float = NEAREST_POINT_MAX_M
    snap_max_m: float = SNAP_MAX_M
    stitch_reach_m: float = STITCH_REACH_M
    max_stitch_segments: int = MAX_STITCH_SEGMENTS
    geometry_fixtures: Optional[Path] = None
    address_fixtures: Optional[Path] = None
    localities: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary in the YAML layout."""
        return {
            "locality": self.locality,
            "provider": self.provider,
            "request_delay_s": self.request_delay_s,
            "overpass": {
                "instances": list(self.overpass_instances),
                "timeout_s": self.overpass_timeout_s,
                "user_agent": self.user_agent,
            },
            "nominatim": {
                "url": self.nominatim_url,
                "timeout_s": self.nominatim_timeout_s,
            },
            "geometry": {
                "buffer_m": self.buffer_m,
                "nearest_max_m": self.nearest_max_m,
                "snap_max_m": self.snap_max_m,
                "stitch_reach_m": self.stitch_reach_m,
                "max_stitch_segments": self.max_stitch_segments,
            },
            "fixtures": {
                "geometry": str(self.geometry_fixtures) if self.geometry_fixtures else None,
                "addresses": str(self.address_fixtures) if self.address_fixtures else None,
            },
            "localities": self.localities,
        }


class ConfigManager:
    """Manages resolver configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration YAML file (optional)
        """
        self.config_path = config_path

    def load(self, config_path: Optional[Path] = None) -> ResolverConfig:
        """Load and validate configuration.

        Without any path the built-in defaults are returned.

        Args:
            config_path: Path to configuration file (overrides init path)

        Returns:
            ResolverConfig with validated settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If configuration is invalid
        """
        path = config_path or self.config_path
        if path is None:
            return ResolverConfig()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        return self.from_dict(config)

    def from_dict(self, config: Dict[str, Any]) -> ResolverConfig:
        """Build a ResolverConfig from a raw configuration mapping."""
        if not isinstance(config, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        config = self._substitute_env_vars(config)
        self._validate_config(config)
        return self._create_resolver_config(config)

    def _substitute_env_vars(self, config: Any) -> Any:
        """Recursively substitute ${VAR_NAME} or ${VAR_NAME:default} in strings."""
        if isinstance(config, dict):
            return {key: self._substitute_env_vars(value) for key, value in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            return ENV_VAR_PATTERN.sub(
                lambda match: os.environ.get(match.group(1), match.group(2) or ""),
                config,
            )
        else:
            return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration structure.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        for section in ("overpass", "nominatim", "geometry", "fixtures", "localities"):
            if section in config and config[section] is not None and not isinstance(config[section], dict):
                raise ConfigurationError(f"Configuration section '{section}' must be a mapping")

        provider = config.get("provider", "live")
        if provider not in PROVIDERS:
            raise ConfigurationError(
                f"Unknown provider '{provider}', expected one of: {', '.join(PROVIDERS)}"
            )

        instances = (config.get("overpass") or {}).get("instances")
        if instances is not None:
            if not isinstance(instances, list) or not instances:
                raise ConfigurationError("overpass.instances must be a non-empty list")
            for instance in instances:
                if not isinstance(instance, str) or not instance.startswith(("http://", "https://")):
                    raise ConfigurationError(f"Invalid Overpass instance URL: {instance!r}")

        fixtures = config.get("fixtures") or {}
        if provider == "fixture" and not fixtures.get("geometry"):
            raise ConfigurationError("provider 'fixture' requires fixtures.geometry")

    def _create_resolver_config(self, config: Dict[str, Any]) -> ResolverConfig:
        """Create ResolverConfig from validated configuration."""
        defaults = ResolverConfig()
        overpass = config.get("overpass") or {}
        nominatim_config = config.get("nominatim") or {}
        geometry = config.get("geometry") or {}
        fixtures = config.get("fixtures") or {}

        def number(section: Dict[str, Any], key: str, default, cast=float, minimum=0):
            value = section.get(key, default)
            try:
                value = cast(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid value for {key}: {value!r}") from e
            if value < minimum:
                raise ConfigurationError(f"{key} must be at least {minimum}, got {value}")
            return value

        def optional_path(value: Optional[str]) -> Optional[Path]:
            return Path(value).expanduser() if value else None

        return ResolverConfig(
            locality=config.get("locality", defaults.locality),
            provider=config.get("provider", defaults.provider),
            overpass_instances=tuple(overpass.get("instances") or defaults.overpass_instances),
            overpass_timeout_s=number(overpass, "timeout_s", defaults.overpass_timeout_s),
            user_agent=overpass.get("user_agent", defaults.user_agent),
            nominatim_url=nominatim_config.get("url", defaults.nominatim_url),
            nominatim_timeout_s=number(nominatim_config, "timeout_s", defaults.nominatim_timeout_s),
            request_delay_s=number(config, "request_delay_s", defaults.request_delay_s),
            buffer_m=number(geometry, "buffer_m", defaults.buffer_m),
            nearest_max_m=number(geometry, "nearest_max_m", defaults.nearest_max_m),
            snap_max_m=number(geometry, "snap_max_m", defaults.snap_max_m),
            stitch_reach_m=number(geometry, "stitch_reach_m", defaults.stitch_reach_m),
            max_stitch_segments=number(
                geometry, "max_stitch_segments", defaults.max_stitch_segments, cast=int, minimum=1,
            ),
            geometry_fixtures=optional_path(fixtures.get("geometry")),
            address_fixtures=optional_path(fixtures.get("addresses")),
            localities=config.get("localities") or {},
        )

    def save_example_config(self, output_path: Path) -> None:
        """Save an example configuration file.

        Args:
            output_path: Path where to save example config
        """
        example_config = ResolverConfig().to_dict()
        example_config["overpass"]["user_agent"] = "${STREET_GEOMETRY_USER_AGENT:street-geometry/0.1}"
        example_config["localities"] = {
            "bg.plovdiv": {
                "bounds": {"south": 42.08, "west": 24.65, "north": 42.2, "east": 24.85},
                "center": {"lat": 42.1354, "lng": 24.7453},
            }
        }

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(example_config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
