"""
Router Configuration

Settings and environment variable management.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class RouterSettings(BaseSettings):
    """Login action router settings."""

    # Addressing
    home_url: str = Field(
        default="http://localhost",
        validation_alias="AUTHROUTES_HOME_URL",
        description="Public root of the current site"
    )

    site_url: Optional[str] = Field(
        default=None,
        validation_alias="AUTHROUTES_SITE_URL",
        description="Where the host's legacy endpoints live (defaults to home_url)"
    )

    network_home_url: Optional[str] = Field(
        default=None,
        validation_alias="AUTHROUTES_NETWORK_HOME_URL",
        description="Root of the network in multi-tenant deployments (defaults to home_url)"
    )

    multisite: bool = Field(
        default=False,
        validation_alias="AUTHROUTES_MULTISITE",
        description="Whether this is a network (multi-tenant) deployment"
    )

    use_permalinks: bool = Field(
        default=True,
        validation_alias="AUTHROUTES_USE_PERMALINKS",
        description="Use slug paths instead of ?action= query strings"
    )

    trailing_slash: bool = Field(
        default=True,
        validation_alias="AUTHROUTES_TRAILING_SLASH",
        description="Whether the permalink structure ends with a slash"
    )

    force_ssl_admin: bool = Field(
        default=False,
        validation_alias="AUTHROUTES_FORCE_SSL_ADMIN",
        description="Force https for the login/admin URL schemes"
    )

    admin_path: str = Field(
        default="/wp-admin/",
        validation_alias="AUTHROUTES_ADMIN_PATH",
        description="Path prefix of the administrative area"
    )

    # Login / registration policy
    login_type: str = Field(
        default="default",
        pattern=r"^(default|username|email)$",
        validation_alias="AUTHROUTES_LOGIN_TYPE",
        description="Which identifier users log in with"
    )

    registration_type: str = Field(
        default="default",
        pattern=r"^(default|email)$",
        validation_alias="AUTHROUTES_REGISTRATION_TYPE",
        description="Whether the email address doubles as the user login"
    )

    allow_user_passwords: bool = Field(
        default=False,
        validation_alias="AUTHROUTES_ALLOW_USER_PASSWORDS",
        description="Let users choose their password at registration"
    )

    allow_auto_login: bool = Field(
        default=False,
        validation_alias="AUTHROUTES_ALLOW_AUTO_LOGIN",
        description="Log users in right after registration or activation"
    )

    users_can_register: bool = Field(
        default=True,
        validation_alias="AUTHROUTES_USERS_CAN_REGISTER",
        description="Whether the register link is shown on forms"
    )

    actions_file: Optional[str] = Field(
        default=None,
        validation_alias="AUTHROUTES_ACTIONS_FILE",
        description="YAML file with action title/slug/flag overrides"
    )

    # Single-use tokens
    secret_key: str = Field(
        default="default-insecure-key-change-me",
        validation_alias="SECRET_KEY",
        description="Secret used to sign single-use tokens"
    )

    nonce_lifetime_seconds: int = Field(
        default=86400,
        ge=2,
        validation_alias="AUTHROUTES_NONCE_LIFETIME",
        description="Lifetime of a single-use token (seconds)"
    )

    auth_cookie_name: str = Field(
        default="authroutes_logged_in",
        validation_alias="AUTHROUTES_AUTH_COOKIE",
        description="Name of the signed logged-in cookie"
    )

    auth_cookie_lifetime_seconds: int = Field(
        default=172800,
        ge=1,
        validation_alias="AUTHROUTES_AUTH_COOKIE_LIFETIME",
        description="Lifetime of the logged-in cookie (seconds)"
    )

    # Rewrite table persistence
    redis_url: Optional[str] = Field(
        default=None,
        validation_alias="REDIS_URL",
        description="Redis URL for the rewrite-rule table (in-memory when unset)"
    )

    # Service config
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level for the router loggers"
    )

    api_host: str = Field(
        default="0.0.0.0",
        validation_alias="API_HOST",
        description="API server host"
    )

    api_port: int = Field(
        default=8080,
        validation_alias="API_PORT",
        description="API server port"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True

    @property
    def resolved_site_url(self) -> str:
        return self.site_url or self.home_url

    @property
    def resolved_network_home_url(self) -> str:
        if self.multisite and self.network_home_url:
            return self.network_home_url
        return self.home_url

    def is_email_login_type(self) -> bool:
        return self.login_type == "email"

    def is_username_login_type(self) -> bool:
        return self.login_type == "username"

    def is_email_registration_type(self) -> bool:
        return self.registration_type == "email"


@lru_cache
def get_settings() -> RouterSettings:
    return RouterSettings()
