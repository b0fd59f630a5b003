from provider_gateway.core.config.config import Config, config, get_config
from provider_gateway.core.config.validation import ConfigError

__all__ = ["Config", "ConfigError", "config", "get_config"]
