"""
Utility modules: landing configuration and environment settings
"""
from .config_loader import LandingConfig, load_landing_config
from .settings import Settings, load_settings

__all__ = [
    'LandingConfig',
    'load_landing_config',
    'Settings',
    'load_settings',
]
