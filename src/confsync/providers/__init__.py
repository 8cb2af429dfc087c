"""
confsync Configuration Providers

Provider capability consumed by the synchronization engine and its
AWS AppConfig implementation.
"""

from confsync.providers.appconfig import AppConfigProvider
from confsync.providers.base import ConfigurationProvider, LatestConfiguration, Profile, ProfilePage

__all__ = [
    "AppConfigProvider",
    "ConfigurationProvider",
    "LatestConfiguration",
    "Profile",
    "ProfilePage",
]
