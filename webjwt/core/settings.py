"""Library settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TYP = "JWT"


class JwtSettings(BaseSettings):
    """Defaults applied when sign/verify are called without options."""

    model_config = SettingsConfigDict(env_prefix="WEBJWT_")

    default_algorithm: str = DEFAULT_ALGORITHM
    default_typ: str = DEFAULT_TYP
    throw_error: bool = False

    def default_header(self) -> dict[str, str]:
        """Build the header used when the caller supplies none."""
        return {"typ": self.default_typ}
