"""
Configuration Schemas for plankalink.

Security:
    Sensitive fields use SecretStr to prevent accidental logging
    of credentials. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr

from plankalink.integrations.planka.client import PlankaConfig


class AppSettings(BaseModel):
    """
    Application settings model.

    Used for type-safe settings access; populated from the environment by
    `plankalink.app.dependencies.get_settings()`.
    """

    # Planka server
    planka_base_url: str = Field(default="", description="Planka server URL")
    planka_agent_email: str = Field(default="", description="Email or username to log in with")
    planka_agent_password: SecretStr = Field(default=SecretStr(""), description="Login password")
    planka_access_token: SecretStr | None = Field(
        default=None, description="Pre-issued access token (skips login)"
    )

    # HTTP
    timeout: float = Field(30.0, gt=0)
    download_timeout: float = Field(60.0, gt=0)

    # Attachments
    temp_dir: str | None = Field(default=None, description="Root for temporary downloads")

    # Logging
    log_level: str = "INFO"
    log_requests: bool = False

    def to_planka_config(self) -> PlankaConfig:
        """
        Build the client configuration.

        Raises:
            ValueError: If the base URL or credentials are missing
        """
        token = self.planka_access_token.get_secret_value() if self.planka_access_token else None
        return PlankaConfig(
            base_url=self.planka_base_url,
            email_or_username=self.planka_agent_email,
            password=self.planka_agent_password.get_secret_value(),
            access_token=token or None,
            timeout=self.timeout,
            download_timeout=self.download_timeout,
            temp_dir=self.temp_dir,
            log_requests=self.log_requests,
            log_responses=self.log_requests,
        )
