#!/usr/bin/env python3
"""
wavtagger/cli/main.py
Command line entry point.

Usage:
    wavtagger [--root DIR] [--config wavtagger.yaml] [--log-file wavtagger.log]

Exit codes:
    0  batch finished, user quit, or nothing to do
    1  decode, conversion or metadata write failure
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from wavtagger.audio.player import SoundDevicePlayer
from wavtagger.config.tagger_config import TaggerConfig, DEFAULT_CONFIG_NAME
from wavtagger.discovery import discover_files
from wavtagger.errors import WavTaggerError
from wavtagger.finalize import BatchFinalizer, FfmpegConverter, VorbisTagWriter
from wavtagger.session.controller import SessionController, remove_from_disk
from wavtagger.tui.tagger_tui import TaggerApp
from wavtagger.utils.loggers import setup_logging

logger = logging.getLogger("TaggerApp")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavtagger",
        description="Tag and locate wav recordings while they play, then convert them to FLAC.")
    parser.add_argument("--root", type=Path, default=Path("."),
                        help="Directory to scan recursively (default: current directory)")
    parser.add_argument("--config", type=Path, default=None,
                        help=f"YAML config file (default: ./{DEFAULT_CONFIG_NAME} if present)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level (default: WARNING)")
    parser.add_argument("--log-file", default=None,
                        help="Write log records to this file")
    return parser


def load_config(path: Optional[Path]) -> TaggerConfig:
    if path is None:
        default_path = Path(DEFAULT_CONFIG_NAME)
        if not default_path.exists():
            return TaggerConfig.defaults()
        path = default_path
    config = TaggerConfig.from_file(path)
    config.validate()
    return config


def build_controller(files, config: TaggerConfig, player=None) -> SessionController:
    finalizer = BatchFinalizer(
        converter=FfmpegConverter(config.encoder, config.compression_level),
        tag_writer=VorbisTagWriter(config.tag_delimiter),
        output_extension=config.output_extension,
    )
    return SessionController(
        files,
        player=player or SoundDevicePlayer(),
        finalizer=finalizer,
        remover=remove_from_disk if config.delete_from_disk else None,
        seek_step=config.seek_step,
        waveform_points=config.waveform_points,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(default_level=args.log_level, log_file=args.log_file)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"Error: bad configuration: {e}", file=sys.stderr)
        return 1

    try:
        files = discover_files(args.root, config.input_extension)
    except WavTaggerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not files:
        print(f"No {config.input_extension} files found in {args.root}.")
        return 0

    controller = build_controller(files, config)
    try:
        controller.start()
    except WavTaggerError as e:
        controller.close()
        print(f"Error: {e}", file=sys.stderr)
        return 1

    app = TaggerApp(controller, poll_interval=config.poll_interval)
    try:
        app.run()
    finally:
        controller.close()

    return_code = app.return_code or 0
    logger.info("session ended with return code %d", return_code)
    return return_code


if __name__ == "__main__":
    sys.exit(main())
