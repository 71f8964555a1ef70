# -*- coding: utf-8 -*-
import os

from typing import Optional, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from dotenv import load_dotenv


class Settings(BaseSettings):
    """Placement deployment settings, named after the devstack variables"""

    # Service identity
    SERVICE_HOST: str = "127.0.0.1"
    SERVICE_PROTOCOL: Literal["http", "https"] = "http"
    PLACEMENT_SERVICE_HOST: Optional[str] = None
    PLACEMENT_SERVICE_PROTOCOL: Optional[Literal["http", "https"]] = None
    PLACEMENT_AUTH_STRATEGY: str = "keystone"
    TLS_PROXY_ENABLED: bool = False
    SSL_CERT_FILE: Optional[str] = None
    SSL_KEY_FILE: Optional[str] = None

    # Backend settings
    WSGI_MODE: str = "uwsgi"
    API_WORKERS: int = 2
    WORKER_TIMEOUT: int = 90
    SERVICE_TIMEOUT: int = 60
    STACK_USER: str = "stack"
    USE_VENV: bool = False
    PLACEMENT_VENV: Optional[str] = None
    PYTHON_VERSION: str = "python3"
    UWSGI_BIN: str = "uwsgi"

    # Paths
    PLACEMENT_CONF_DIR: str = "/etc/placement"
    PLACEMENT_BIN_DIR: str = "/usr/local/bin"
    PLACEMENT_SOURCE: str = "openstack-placement"
    APACHE_NAME: str = "apache2"
    APACHE_SITES_AVAILABLE: str = "/etc/apache2/sites-available"
    APACHE_SITES_ENABLED: str = "/etc/apache2/sites-enabled"
    UWSGI_SOCKET_DIR: str = "/var/run/uwsgi"
    STATE_DIR: str = "~/.placement-deploy"

    # Database settings
    PLACEMENT_DB_ENABLED: bool = True
    DATABASE_TYPE: Literal["mysql", "postgresql"] = "mysql"
    DATABASE_HOST: str = "127.0.0.1"
    DATABASE_USER: str = "root"
    DATABASE_PASSWORD: str = ""

    # Identity settings
    KEYSTONE_AUTH_URI: Optional[str] = None
    IDENTITY_CLOUD: str = "devstack-admin"
    SERVICE_PASSWORD: str = ""
    SERVICE_PROJECT_NAME: str = "service"
    SERVICE_DOMAIN_NAME: str = "Default"
    SERVICE_ROLE: str = "admin"
    REGION_NAME: str = "RegionOne"

    # Logging
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="allow",
    )

    @field_validator("API_WORKERS", "SERVICE_TIMEOUT", mode="after")
    @classmethod
    def validate_positive(cls, value, info):
        if value < 1:
            raise ValueError(f"{info.field_name} must be at least 1")
        return value


_settings: Optional[Settings] = None


def get_settings(config_file: Optional[str] = None) -> Settings:
    global _settings

    env_file = ".env"
    env_example_file = ".env.example"

    if _settings is None:
        if config_file and os.path.exists(config_file):
            load_dotenv(config_file, override=True)
        elif os.path.exists(env_file):
            load_dotenv(env_file)
        elif os.path.exists(env_example_file):
            load_dotenv(env_example_file)
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
