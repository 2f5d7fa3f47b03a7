"""Command-line interface for GlyphReel."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import Iterable, Optional, TextIO, Tuple
from types import TracebackType

from rich.console import Console
from rich.markup import escape

from glyphreel.ansi import RESET
from glyphreel.config import AppConfig, load_config, save_config
from glyphreel.crashdump import dump_threads, enable_faulthandler
from glyphreel.errors import GlyphReelError, InvalidConfiguration
from glyphreel.export import write_frame, write_script
from glyphreel.image import open_image
from glyphreel.logging_setup import init_logging, set_console_level
from glyphreel.media import FfmpegMedia, MediaTool
from glyphreel.playback import play, play_with_audio
from glyphreel.sequence import open_video
from glyphreel.settings import CHAR_PRESETS, RenderSettings, RunOptions
from glyphreel.webcam import run_webcam

logger = logging.getLogger(__name__)

_stderr = Console(stderr=True, highlight=False)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="glyphreel", description="Render images, videos and webcams as text"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-i", "--image", metavar="example.jpg", help="Input image")
    source.add_argument("-v", "--video", metavar="example.mp4", help="Input video")
    source.add_argument(
        "-e",
        "--webcam",
        type=int,
        metavar="0",
        help="Take input from the webcam with this index",
    )
    parser.add_argument(
        "-o",
        "--output-file",
        metavar="example.sh",
        help=(
            "Write output to this file instead of stdout. Images are written "
            "as is; videos become a shell script that replays them"
        ),
    )
    parser.add_argument(
        "-a",
        "--audio",
        action="store_true",
        help="Play the video's audio track alongside it",
    )
    parser.add_argument(
        "-n", "--no-color", action="store_true", help="Render without colors"
    )
    parser.add_argument(
        "-c",
        "--char-set",
        choices=sorted(CHAR_PRESETS),
        default=None,
        help="Character set (default: medium, light when color is off)",
    )
    parser.add_argument(
        "-W", "--width", type=int, default=None, help="Output width in cells"
    )
    parser.add_argument(
        "-H", "--height", type=int, default=None, help="Output height in cells"
    )
    parser.add_argument(
        "-p",
        "--no-preserve-aspect-ratio",
        action="store_true",
        help="Stretch the input to the output size",
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Remember color, char set, aspect and size options for later runs",
    )
    return parser


def terminal_size(console: Optional[Console] = None) -> Optional[tuple[int, int]]:
    """Return the largest grid that fits the terminal, if there is one.

    Every pixel takes two columns, and one row is left for the cursor.
    """
    console = console if console is not None else Console()
    if not console.is_terminal:
        logger.warning("Unable to get terminal size")
        return None
    size = console.size
    return (max(1, size.width // 2), max(1, size.height - 1))


def build_run_options(args: argparse.Namespace) -> RunOptions:
    if args.image is not None:
        source, path = "image", args.image
    elif args.video is not None:
        source, path = "video", args.video
    else:
        source, path = "webcam", None
    return RunOptions(
        source=source,
        path=path,
        camera_index=args.webcam,
        output_file=args.output_file,
        audio=args.audio,
    )


def build_settings(
    args: argparse.Namespace,
    app_config: AppConfig,
    term_size: Optional[tuple[int, int]],
) -> RenderSettings:
    """Merge CLI flags over saved defaults over the terminal size."""
    settings = RenderSettings()
    color = app_config.color and not args.no_color
    char_set = args.char_set or app_config.char_set
    if char_set is None:
        char_set = "medium" if color else "light"
    width, height = term_size if term_size is not None else settings.size
    width = app_config.width or width
    height = app_config.height or height
    if args.width is not None:
        width = args.width
    if args.height is not None:
        height = args.height
    return settings.with_preset(char_set).with_overrides(
        color=color,
        width=width,
        height=height,
        preserve_aspect_ratio=(
            app_config.preserve_aspect_ratio and not args.no_preserve_aspect_ratio
        ),
    )


def _defaults_from_args(args: argparse.Namespace, current: AppConfig) -> AppConfig:
    return AppConfig(
        color=current.color and not args.no_color,
        char_set=args.char_set or current.char_set,
        preserve_aspect_ratio=(
            current.preserve_aspect_ratio and not args.no_preserve_aspect_ratio
        ),
        width=args.width if args.width is not None else current.width,
        height=args.height if args.height is not None else current.height,
    )


def run(
    options: RunOptions,
    settings: RenderSettings,
    out: TextIO,
    media: Optional[MediaTool] = None,
) -> int:
    """Execute one validated run and return the exit code."""
    if options.source == "webcam":
        if options.camera_index is None:
            raise InvalidConfiguration("webcam input needs a camera index")
        run_webcam(options.camera_index, settings, out)
        return 0

    if options.path is None:
        raise InvalidConfiguration(f"{options.source} input needs a path")

    if options.source == "image":
        frame = open_image(options.path, settings)
        if options.output_file:
            write_frame(frame, options.output_file)
        else:
            out.write(frame + "\n")
            out.flush()
        return 0

    tool = media if media is not None else FfmpegMedia()
    _stderr.print("Opening video...", end="")
    sequence = open_video(options.path, settings, tool)
    _stderr.print("Done")
    if options.output_file:
        write_script(sequence, options.output_file)
    elif options.audio:
        _stderr.print("Extracting audio...", end="")
        audio = tool.extract_audio(options.path)
        _stderr.print("Done")
        play_with_audio(sequence, audio, out)
    else:
        play(sequence, out)
    return 0


def _report_error(message: str) -> None:
    _stderr.print(f"[bold red]error[/]: {escape(message)}")


def _install_exception_hooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    def thread_hook(args: threading.ExceptHookArgs) -> None:
        exc_value = args.exc_value or RuntimeError("unknown")
        exc_info: Tuple[type[BaseException], BaseException, Optional[TracebackType]] = (
            args.exc_type,
            exc_value,
            args.exc_traceback,
        )
        thread_name = args.thread.name if args.thread else "thread"
        logger.exception("Thread exception in %s", thread_name, exc_info=exc_info)
        dump_threads(f"thread exception in {thread_name}")

    threading.excepthook = thread_hook


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    log_path = init_logging()
    enable_faulthandler(log_path)
    _install_exception_hooks()
    logger.info("App start")

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        options = build_run_options(args)
        app_config = load_config()
        settings = build_settings(args, app_config, terminal_size())
        if args.save_defaults:
            path = save_config(_defaults_from_args(args, app_config))
            logger.info("Saved defaults to %s", path)
        set_console_level(logging.WARNING)
        exit_code = run(options, settings, sys.stdout)
    except GlyphReelError as exc:
        logger.error("Run failed: %s", exc)
        _report_error(str(exc))
        exit_code = 1
    except RuntimeError as exc:
        logger.exception("Backend unavailable")
        _report_error(str(exc))
        exit_code = 1
    except KeyboardInterrupt:
        sys.stdout.write(RESET + "\n")
        exit_code = 130
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
