# shapeforge/config/schema.py
"""
Configuration schema for a generation run.

This is the single source of truth for run settings.

Schema hierarchy:
- CodegenSettings: the settings consumed by CodegenPipeline
- RuntimeConfigSettings: where generated code finds its runtime crates
- CodegenFlags: target and feature switches
- DecoratorManifest: which decorators take part in the run
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shapeforge.symbols.symbol import RuntimeConfig


class RuntimeConfigSettings(BaseModel):
    """Runtime crate location."""

    crate_prefix: str = Field(default="aws-smithy", description="Prefix of runtime crate names")
    version: str = Field(default="0.1.0", description="Runtime crate version")
    relative_path: Optional[str] = Field(
        default=None, description="Local path to runtime crates instead of a registry version"
    )

    model_config = ConfigDict(extra="forbid")

    def to_runtime_config(self) -> RuntimeConfig:
        return RuntimeConfig(
            crate_prefix=self.crate_prefix,
            version=self.version,
            relative_path=self.relative_path,
        )


class CodegenFlags(BaseModel):
    """Target and feature switches."""

    python_server: bool = Field(
        default=False, description="Resolve runtime types to Python server wrapper types"
    )
    eager_pattern_regex: bool = Field(
        default=True, description="Compile @pattern regexes when the service is built"
    )
    normalize_operations: bool = Field(
        default=True, description="Give every operation synthetic input/output envelopes"
    )

    model_config = ConfigDict(extra="forbid")


class DecoratorManifest(BaseModel):
    """
    Declarative decorator selection.

    Examples:
        >>> DecoratorManifest(disabled=["S3"])
        >>> DecoratorManifest(enabled=["SdkConfig"], scan_packages=["my_codegen.decorators"])
    """

    enabled: Optional[List[str]] = Field(
        default=None, description="If set, only these decorators run (by name)"
    )
    disabled: List[str] = Field(default_factory=list, description="Decorators to skip (by name)")
    scan_packages: List[str] = Field(
        default_factory=list, description="Extra packages scanned for decorator classes"
    )

    model_config = ConfigDict(extra="forbid")


class CodegenSettings(BaseModel):
    """
    Settings of one generation run.

    Examples:
        >>> settings = CodegenSettings(service="example.weather#Weather", module_name="weather")
        >>> settings.runtime.crate_prefix
        'aws-smithy'
    """

    service: str = Field(..., description="Absolute shape id of the service to generate")
    module_name: str = Field(..., description="Name of the generated crate")
    module_version: str = Field(default="0.0.1", description="Version of the generated crate")
    protocol: Optional[str] = Field(
        default=None, description="Protocol trait id to use when the service supports several"
    )
    runtime: RuntimeConfigSettings = Field(default_factory=RuntimeConfigSettings)
    codegen: CodegenFlags = Field(default_factory=CodegenFlags)
    decorators: DecoratorManifest = Field(default_factory=DecoratorManifest)

    model_config = ConfigDict(extra="forbid")

    @field_validator("service")
    @classmethod
    def _service_is_absolute(cls, v: str) -> str:
        if "#" not in v:
            raise ValueError(f"service must be an absolute shape id (namespace#Name), got {v!r}")
        return v

    @field_validator("module_name")
    @classmethod
    def _module_name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("module_name must not be empty")
        return v

    @property
    def module_use_name(self) -> str:
        """Crate name as used in ``use`` paths."""
        return self.module_name.replace("-", "_")


__all__ = ["CodegenSettings", "RuntimeConfigSettings", "CodegenFlags", "DecoratorManifest"]
