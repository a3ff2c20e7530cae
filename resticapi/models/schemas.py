from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RepositoryConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    location: str = Field(alias="path")
    secret: str = Field(alias="password", repr=False)

    @field_validator("location", "secret")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    ip: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)


class ResticConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    binary: str = "restic"
    timeout_seconds: Optional[float] = Field(default=3600, ge=0)  # 0 disables


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    repository: RepositoryConfig
    server: ServerConfig
    restic: ResticConfig = ResticConfig()


class RestoreRequest(BaseModel):
    snapshot_id: str
    target_dir: str
