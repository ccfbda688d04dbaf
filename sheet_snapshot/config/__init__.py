from .loader import DEFAULT_CONFIG_PATH, ConfigError, load_config, parse_config

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "load_config",
    "parse_config",
]
