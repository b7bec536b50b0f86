"""Configuration models for the reconciler."""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from takeout_reconcile.common import LoggingConfig


class PathsConfig(BaseModel):
    """Directory and file names, relative to the working directory."""

    model_config = ConfigDict(extra='forbid')

    photos_dir_name: str = Field(
        default="Google Photos",
        description="Library directory that accumulates every processed export"
    )
    merge_dir_name: str = Field(
        default="Temporary Merged Takeout",
        description="Scratch directory the extracted takeouts are merged into"
    )
    takeout_photos_subpath: str = Field(
        default="Takeout/Google Photos",
        description="Location of the albums inside a merged takeout"
    )
    archive_prefix: str = Field(
        default="takeout",
        description="Name prefix of export archives and extracted takeout directories"
    )
    run_marker_name: str = Field(
        default="last-takeout.txt",
        description="Text file recording when the last run completed"
    )

    @field_validator('photos_dir_name', 'merge_dir_name', 'archive_prefix', 'run_marker_name')
    @classmethod
    def reject_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class ToolsConfig(BaseModel):
    """External tool executables."""

    model_config = ConfigDict(extra='forbid')

    rsync: str = Field(default="rsync", description="rsync executable used for tree merges")
    rsync_min_major_version: int = Field(
        default=3,
        ge=1,
        description="Oldest rsync major version with --crtimes support"
    )
    setfile: str = Field(default="SetFile", description="SetFile executable used for stamping")


class StampingConfig(BaseModel):
    """Creation-time stamping of matched media files."""

    model_config = ConfigDict(extra='forbid')

    progress_log_interval: int = Field(
        default=100,
        ge=1,
        description="Log stamping progress every N files"
    )


class ReconcilerConfig(BaseModel):
    """Root configuration for the reconciler."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    stamping: StampingConfig = Field(default_factory=StampingConfig)
