from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class _Section(BaseModel):
    # misspelled keys fail loudly instead of silently keeping a default
    model_config = ConfigDict(extra="forbid")


class IdentityConfig(_Section):
    identifier_fields: list[str] = Field(default_factory=lambda: ["uuid", "id"])
    set_field: str | None = "sets"


class LifecycleConfig(_Section):
    deprecated_field: str = "deprecated"
    comment_field: str = "deprecated_comment"


class CompatibilityConfig(_Section):
    properties_field: str = "properties"
    required_field: str = "required"
    title_field: str = "title"
    schema_ref_field: str = "$schema"
    default_field: str = "default"
    enum_field: str = "enum"
    type_field: str = "type"
    enum_removal_breaking: bool = True


class LimitsConfig(_Section):
    max_nodes: int | None = Field(default=1_000_000, gt=0)
    max_workers: int = Field(default=4, gt=0)


class ReleaseConfig(_Section):
    strict_bumps: bool = False


class CatalogDiffConfig(_Section):
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)
    compatibility: CompatibilityConfig = Field(default_factory=CompatibilityConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
