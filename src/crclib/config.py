"""Configuration models for crclib."""

from pydantic import BaseModel, Field, ConfigDict

from .checksums import WINDOW_SIZE
from .common import LoggingConfig


class ChecksumConfig(BaseModel):
    """Checksum computation configuration."""

    model_config = ConfigDict(extra='forbid')

    window_size: int = Field(
        default=WINDOW_SIZE,
        ge=1,
        description="Maximum number of bytes read and processed per window"
    )


class DemoConfig(BaseModel):
    """Settings for the crclib-demo driver."""

    model_config = ConfigDict(extra='forbid')

    sample_text: str = Field(
        default="Hello, World!",
        description="Text checksummed by the in-memory part of the demo"
    )
    default_file: str = Field(
        default="inputFile.txt",
        description="File checksummed when no path is given on the command line"
    )
    show_progress: bool = Field(
        default=True,
        description="Log progress while checksumming the file"
    )
    progress_log_step: float = Field(
        default=10.0,
        gt=0,
        le=100,
        description="Log progress every N percent"
    )


class CrcLibConfig(BaseModel):
    """Root configuration for crclib."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    checksum: ChecksumConfig = Field(default_factory=ChecksumConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)
