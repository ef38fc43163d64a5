"""Demo driver: checksum a sample string and a file."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .checksums import parse_crc_hex
from .common import ConfigLoader, CrcError, LogContext, setup_logging
from .config import CrcLibConfig
from .progress import ProgressTracker
from .services import CrcService, MemoryCrcService

# Application name derived from package name
_package = __package__ or "crclib"
APP_NAME = _package.replace('_', '-').replace('.', '-')

logger = logging.getLogger(__name__)


async def memory_demo(config: CrcLibConfig) -> None:
    """Checksum and verify the configured sample text."""
    service = MemoryCrcService.from_config(config.checksum)
    text = config.demo.sample_text
    data = text.encode("utf-8")

    print("\n1. In-Memory CRC Calculation")
    try:
        crc = await service.compute_crc(data)
        crc_hex = await service.compute_crc_hex(data)

        print(f'   Test String: "{text}"')
        print(f"   CRC (uint):  {crc}")
        print(f"   CRC (hex):   {crc_hex}")

        print(f"   Verification check (uint): {await service.verify_crc(data, crc)}")
        print(f"   Verification check (hex):  {await service.verify_crc(data, crc_hex)}")
    except CrcError as e:
        logger.exception(f"In-memory demo failed: {e}")
        print(f"An error occurred during in-memory demo: {e.message}")


async def file_demo(
    config: CrcLibConfig,
    file_path: Path,
    show_progress: bool,
    expected: Optional[int] = None,
) -> int:
    """Checksum and verify a file.

    Returns:
        Exit code (0 for success)
    """
    if not file_path.is_file():
        logger.error(f"Input file not found: {file_path}")
        print(f"   Error: File not found at '{file_path}'")
        return 1

    service = CrcService.from_config(config.checksum)

    with LogContext(logger, file_path=str(file_path)):
        try:
            print(f"   Calculating CRC for file: {file_path}")

            progress = None
            if show_progress:
                print("\n   --- With Progress Reporting ---")
                progress = ProgressTracker(file_path.name, log_step=config.demo.progress_log_step)
            crc_hex = await service.compute_crc_hex(file_path, progress)
            print(f"   CRC (hex):   {crc_hex}")

            print("\n   --- Without Progress Reporting ---")
            print(f"   CRC (hex):   {await service.compute_crc_hex(file_path)}")

            is_valid = await service.verify_crc(file_path, crc_hex)
            print(f"\n   Verification check: {is_valid}")

            if expected is not None:
                matches = await service.verify_crc(file_path, expected)
                print(f"   Expected CRC match: {matches}")
                if not matches:
                    return 1
        except (CrcError, OSError) as e:
            logger.exception(f"File demo failed: {e}")
            print(f"   An error occurred during file demo: {e}")
            return 1

    return 0


async def run_demo(
    config: CrcLibConfig,
    file_override: Optional[Path] = None,
    show_progress: Optional[bool] = None,
    expected: Optional[int] = None,
) -> int:
    """Run both demo parts.

    Args:
        config: Configuration object
        file_override: Optional file to checksum instead of demo.default_file
        show_progress: Optional override for demo.show_progress
        expected: Optional checksum the file must match

    Returns:
        Exit code (0 for success)
    """
    logger.info("CrcLib Demo Application Starting...")
    print("CrcLib Demo Application")
    print("-----------------------")

    await memory_demo(config)

    print("\n2. File CRC Calculation")
    file_path = file_override if file_override else Path(config.demo.default_file)
    if file_override is None:
        print(f"   No file path provided, using default '{file_path}'.")
    progress = show_progress if show_progress is not None else config.demo.show_progress

    exit_code = await file_demo(config, file_path, progress, expected)

    logger.info("CrcLib Demo Application Finished.")
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the demo command."""
    parser = argparse.ArgumentParser(
        description="Compute and verify windowed CRC-32 checksums"
    )
    parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        help="File to checksum (defaults to demo.default_file from config)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not report progress while checksumming the file"
    )
    parser.add_argument(
        "--expected",
        help="Expected checksum of the file as hex string; exit 1 on mismatch"
    )

    args = parser.parse_args(argv)

    loader = ConfigLoader(app_name=APP_NAME, config_class=CrcLibConfig)
    config = loader.load(defaults_path=args.config)

    log_file = Path(config.logging.file) if config.logging.file else None
    setup_logging(level=config.logging.level, format=config.logging.format, log_file=log_file)

    expected = None
    if args.expected is not None:
        try:
            expected = parse_crc_hex(args.expected)
        except CrcError as e:
            logger.error(f"{e.message}: {args.expected!r}")
            print(f"Error: {e.message}: {args.expected!r}", file=sys.stderr)
            return 2

    return asyncio.run(run_demo(
        config=config,
        file_override=args.file,
        show_progress=False if args.no_progress else None,
        expected=expected,
    ))


if __name__ == "__main__":
    sys.exit(main())
