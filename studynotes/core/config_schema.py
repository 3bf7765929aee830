"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    AISchema           → ai.yaml
    LoggingSchema      → logging.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class StorageSchema(_StrictBase):
    path: str


class AutosaveSchema(_StrictBase):
    delay_seconds: float = Field(gt=0)


class ExportsSchema(_StrictBase):
    directory: str


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    storage: StorageSchema
    autosave: AutosaveSchema
    exports: ExportsSchema


# =============================================================================
# ai.yaml
# =============================================================================


class AISchema(_StrictBase):
    endpoint: str
    model: str
    temperature: float = Field(ge=0, le=2)
    timeout_seconds: float = Field(gt=0)
    placeholder_api_key: str


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema
