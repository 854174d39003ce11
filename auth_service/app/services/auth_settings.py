"""
Auth Settings

Explicit, validated configuration for the hasher and token issuer.
Built once at startup from ApplicationConfig and injected everywhere else.
"""

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AuthSettings(BaseModel):
    """Token lifetimes, signing keys and Argon2 cost parameters"""

    model_config = ConfigDict(frozen=True)

    access_token_ttl: timedelta = Field(default=timedelta(minutes=15))
    refresh_token_ttl: timedelta = Field(default=timedelta(days=7))
    reset_token_ttl: timedelta = Field(default=timedelta(hours=1))

    access_secret: str = Field(..., min_length=16)
    refresh_secret: str = Field(..., min_length=16)
    jwt_algorithm: str = "HS256"

    # Argon2id parameters (memory in KiB)
    argon2_memory_cost: int = Field(default=19456, ge=8)
    argon2_time_cost: int = Field(default=2, ge=1)
    argon2_parallelism: int = Field(default=1, ge=1)
    argon2_hash_len: int = Field(default=32, ge=16)

    @model_validator(mode="after")
    def check_consistency(self) -> "AuthSettings":
        for name in ("access_token_ttl", "refresh_token_ttl", "reset_token_ttl"):
            if getattr(self, name) <= timedelta(0):
                raise ValueError(f"{name} must be positive")
        if self.access_token_ttl >= self.refresh_token_ttl:
            raise ValueError("access_token_ttl must be shorter than refresh_token_ttl")
        if self.access_secret == self.refresh_secret:
            raise ValueError("access and refresh tokens must use distinct secrets")
        if self.argon2_memory_cost < 8 * self.argon2_parallelism:
            raise ValueError("argon2_memory_cost must be at least 8 * parallelism")
        return self

    @classmethod
    def from_config(cls, config) -> "AuthSettings":
        """Build settings from an ApplicationConfig-like object"""
        return cls(
            access_token_ttl=timedelta(minutes=config.ACCESS_TOKEN_TTL_MINUTES),
            refresh_token_ttl=timedelta(days=config.REFRESH_TOKEN_TTL_DAYS),
            reset_token_ttl=timedelta(minutes=config.RESET_TOKEN_TTL_MINUTES),
            access_secret=config.JWT_ACCESS_SECRET,
            refresh_secret=config.JWT_REFRESH_SECRET,
            argon2_memory_cost=config.ARGON2_MEMORY_COST,
            argon2_time_cost=config.ARGON2_TIME_COST,
            argon2_parallelism=config.ARGON2_PARALLELISM,
            argon2_hash_len=config.ARGON2_HASH_LEN,
        )
