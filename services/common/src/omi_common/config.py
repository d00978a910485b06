"""Shared configuration models for infrastructure components."""

from pydantic import BaseModel, computed_field


class MinioConfig(BaseModel, frozen=True):
    """
    Connection settings for a user's S3-compatible bucket.

    Users register these as a base64-encoded JSON document; the decoded
    document is validated against this model before a client is built.
    """

    endpoint: str
    access_key: str
    secret_key: str
    secure: bool = True
    region: str | None = None


class DatabaseConfig(BaseModel, frozen=True):
    """Immutable database connection configuration."""

    host: str
    port: str
    user: str
    password: str
    database: str

    @computed_field
    @property
    def url(self) -> str:
        """Returns the full PostgreSQL connection URL."""
        return (
            f"postgresql+psycopg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )
