"""
Configuration system for the wavtagger session.

Loads from YAML file or provides sensible defaults.
"""

from dataclasses import dataclass
from pathlib import Path
import yaml


DEFAULT_CONFIG_NAME = "wavtagger.yaml"


@dataclass
class TaggerConfig:
    """
    Global configuration for a tagging session.

    All timing values in seconds unless otherwise noted.
    """

    # Discovery / output
    input_extension: str = ".wav"
    output_extension: str = ".flac"

    # Playback
    seek_step: float = 5.0
    poll_interval: float = 0.1     # UI tick, also bounds input latency

    # Waveform display
    waveform_points: int = 200

    # Encoder
    encoder: str = "ffmpeg"
    compression_level: int = 8

    # Metadata write-back
    tag_delimiter: str = ", "

    # Remove the file from disk on delete, not just from the batch
    delete_from_disk: bool = True

    @classmethod
    def from_file(cls, path: Path) -> 'TaggerConfig':
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML config file

        Returns:
            TaggerConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file format: {path}")

        return cls(**data)

    @classmethod
    def defaults(cls) -> 'TaggerConfig':
        """
        Get default configuration.

        Returns:
            TaggerConfig with default values
        """
        return cls()

    def validate(self):
        """
        Validate configuration values.

        Raises:
            ValueError: If any values are invalid
        """
        for name in ("input_extension", "output_extension", "encoder", "tag_delimiter"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string")

        if not self.input_extension.startswith("."):
            raise ValueError("input_extension must start with '.'")

        if not self.output_extension.startswith("."):
            raise ValueError("output_extension must start with '.'")

        if self.input_extension.lower() == self.output_extension.lower():
            raise ValueError("output_extension must differ from input_extension")

        if self.seek_step <= 0:
            raise ValueError("seek_step must be positive")

        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        if self.waveform_points < 1:
            raise ValueError("waveform_points must be at least 1")

        if not (0 <= self.compression_level <= 12):
            raise ValueError("compression_level must be between 0 and 12")

        if not self.tag_delimiter:
            raise ValueError("tag_delimiter must not be empty")
