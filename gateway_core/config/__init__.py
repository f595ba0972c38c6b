"""Configuration package for gateway core."""
from .settings import GatewayConfig, Settings, get_settings

__all__ = ["GatewayConfig", "Settings", "get_settings"]
