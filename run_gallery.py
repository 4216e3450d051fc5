#!/usr/bin/env python3
"""Simple CLI runner for the TESSERA layout engine."""

import argparse
import asyncio
import sys

from core.config import TesseraConfig
from core.gallery import Gallery
from core.logging import configure_logging, get_logger
from core.records import FileRecordSource, RecordSource
from core.render import Frame
from spatial.layouts import LayoutName

logger = get_logger(__name__)


def print_status(gallery: Gallery) -> None:
    for key, value in gallery.get_status().items():
        print(f"  {key}: {value}")


def build_gallery(args: argparse.Namespace, config: TesseraConfig) -> Gallery:
    if args.file:
        source = FileRecordSource(args.file)
    else:
        source = RecordSource(args.url or config.data_source_url, timeout=config.request_timeout)
    return Gallery(source, config=config)


async def run_demo(args: argparse.Namespace) -> int:
    """Load records, then cycle through every layout while the frame clock runs."""
    config = TesseraConfig()
    configure_logging(args.log_level or config.log_level)

    gallery = build_gallery(args, config)
    frames = {"count": 0}

    def count_frame(frame: Frame) -> None:
        frames["count"] += 1

    gallery.add_render_listener(count_frame)

    if not await gallery.initialize():
        print("Gallery unavailable: records could not be loaded")
        return 1

    await gallery.start()
    try:
        for name in args.layouts:
            gallery.transform_to(name, args.duration)
            # worst-case task duration is twice the base
            await asyncio.sleep(2 * (args.duration or config.base_duration) + 0.1)
            print(f"\n[{name}] rendered frames so far: {frames['count']}")
            print_status(gallery)
    finally:
        await gallery.stop()

    logger.info("Demo complete!", frames=frames["count"])
    return 0


async def interactive_mode(args: argparse.Namespace) -> int:
    """Run an interactive REPL for the gallery."""
    config = TesseraConfig()
    configure_logging(args.log_level or config.log_level)

    gallery = build_gallery(args, config)
    if not await gallery.initialize():
        print("Gallery unavailable: records could not be loaded")
        return 1
    await gallery.start()

    print("\n" + "=" * 60)
    print("TESSERA Interactive Gallery")
    print("=" * 60)
    print("\nCommands:")
    for name in LayoutName:
        print(f"  {name.value:<12} - Transition to the {name.value} layout")
    print("  status       - Show gallery status")
    print("  quit         - Exit")
    print()

    loop = asyncio.get_running_loop()
    try:
        while True:
            # read input off the loop so the frame clock keeps ticking
            cmd = (await loop.run_in_executor(None, input, "> ")).strip().lower()
            if not cmd:
                continue
            if cmd == "quit":
                break
            if cmd == "status":
                print_status(gallery)
                continue
            try:
                gallery.transform_to(cmd, args.duration)
                print(f"Transitioning to {cmd}")
            except Exception as e:
                print(f"Error: {e}")
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        await gallery.stop()
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Animate record cards between 3D layouts")
    parser.add_argument("--url", help="Records endpoint (defaults to TESSERA_DATA_SOURCE_URL)")
    parser.add_argument("--file", help="Read records from a local JSON file instead")
    parser.add_argument("--duration", type=float, default=None, help="Base transition duration (s)")
    parser.add_argument(
        "--layouts",
        nargs="+",
        default=[name.value for name in LayoutName],
        choices=[name.value for name in LayoutName],
        help="Layouts to cycle through in demo mode",
    )
    parser.add_argument("--interactive", action="store_true", help="Start the interactive REPL")
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def main():
    """Main entry point."""
    args = parse_args()
    if args.interactive:
        sys.exit(asyncio.run(interactive_mode(args)))
    sys.exit(asyncio.run(run_demo(args)))


if __name__ == "__main__":
    main()
