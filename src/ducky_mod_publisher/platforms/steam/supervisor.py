"""Supervision of the isolated upload worker.

The Steamworks client holds native resources that are only reliably
released when its process exits, so uploads run in a child process
(see :mod:`.worker`). The child writes one line per event to stdout,
prefixed with ``[INFO]``, ``[WARNING]``, ``[ERROR]``, ``[DEBUG]``,
``[SUCCESS]`` or ``[PROGRESS] <done> <total>``.
:func:`run_upload_in_subprocess` relays those lines and tears the child
down on timeout or interruption.
"""

import logging
import os
import subprocess
import sys
import threading
from collections.abc import Callable
from pathlib import Path

from ...config import STEAM_APP_ID_ENV
from ...errors import SteamUploadError
from .progress import SUCCESS
from .upload import PushOptions

logger = logging.getLogger(__name__)

WORKER_MODULE = "ducky_mod_publisher.platforms.steam.worker"

# Seconds allowed for a whole upload
DEFAULT_TIMEOUT = 1800

# Seconds to wait after terminate() before kill()
TERMINATE_GRACE = 5

PROGRESS_PREFIX = "[PROGRESS]"

# Leads each suggestion line the worker writes after an error message
SUGGESTION_MARKER = "•"

LINE_LEVELS = {
    "[DEBUG]": logging.DEBUG,
    "[INFO]": logging.INFO,
    "[SUCCESS]": SUCCESS,
    "[WARNING]": logging.WARNING,
    "[ERROR]": logging.ERROR,
}


def build_worker_args(mod_dir: Path, options: PushOptions) -> list[str]:
    args = [str(mod_dir)]
    if options.update_description:
        args.append("--update-description")
    if options.changelog:
        args.extend(["--changelog", options.changelog])
    if options.skip_tail:
        args.append("--skip-tail")
    return args


def parse_worker_line(line: str) -> tuple[int | None, str]:
    """Split a worker line into (log level, message).

    Returns ``(None, "done total")`` for progress lines and
    ``(logging.INFO, line)`` for unprefixed lines. Indentation after the
    space that follows the prefix is kept.

    Example:
        >>> parse_worker_line("[WARNING] Slow upload")
        (30, 'Slow upload')
    """
    if line.startswith(PROGRESS_PREFIX):
        return None, line[len(PROGRESS_PREFIX):].strip()

    for prefix, level in LINE_LEVELS.items():
        if line.startswith(prefix):
            return level, line[len(prefix):].removeprefix(" ").rstrip()

    return logging.INFO, line


def split_worker_errors(lines: list[str]) -> tuple[str, list[str]]:
    """Split relayed error lines into (message, suggestions).

    Lines led by SUGGESTION_MARKER are suggestions; all other lines
    make up the message, joined with newlines.

    Example:
        >>> split_worker_errors(["Upload failed", "  • Try again later"])
        ('Upload failed', ['Try again later'])
    """
    message_lines: list[str] = []
    suggestions: list[str] = []

    for line in lines:
        stripped = line.lstrip()
        if stripped.startswith(SUGGESTION_MARKER):
            suggestions.append(stripped[len(SUGGESTION_MARKER):].strip())
        else:
            message_lines.append(line)

    return "\n".join(message_lines), suggestions


def _terminate(process: subprocess.Popen) -> None:
    if process.poll() is not None:
        return

    process.terminate()
    try:
        process.wait(timeout=TERMINATE_GRACE)
    except subprocess.TimeoutExpired:
        logger.warning("Force killing upload process...")
        process.kill()
        process.wait()


def run_upload_in_subprocess(
    mod_dir: Path,
    options: PushOptions,
    timeout: float | None = DEFAULT_TIMEOUT,
    on_progress: Callable[[int, int], None] | None = None,
    verbose: bool = False,
    app_id: int | None = None,
    python: str = sys.executable,
) -> None:
    """Run the upload in a supervised child process.

    The child is never restarted: a failed first upload may already have
    created the remote item and written its ID to info.ini.

    Args:
        mod_dir: Path to the mod directory
        options: Push options forwarded to the worker
        timeout: Seconds before the child is terminated, or None to wait forever
        on_progress: Called with (bytes_processed, bytes_total)
        verbose: Forward debug output from the worker
        app_id: Steam App ID for the worker; inherits STEAM_APP_ID when None
        python: Interpreter used to run the worker

    Raises:
        SteamUploadError: If the child cannot start, times out or fails
    """
    command = [python, "-m", WORKER_MODULE, *build_worker_args(mod_dir, options)]
    if verbose:
        command.append("--verbose")
    logger.debug("Starting upload worker: %s", " ".join(command))

    env = os.environ.copy()
    if app_id is not None:
        env[STEAM_APP_ID_ENV] = str(app_id)

    try:
        process = subprocess.Popen(
            command,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except OSError as e:
        raise SteamUploadError(
            f"Failed to spawn upload process: {e}",
            ["Ensure the Python interpreter is available"],
        ) from e

    error_lines: list[str] = []

    def relay() -> None:
        if process.stdout is None:
            return

        for raw_line in process.stdout:
            line = raw_line.rstrip()
            if not line:
                continue

            level, message = parse_worker_line(line)
            if level is None:
                done, _, total = message.partition(" ")
                if on_progress and done.isdigit() and total.isdigit():
                    on_progress(int(done), int(total))
            elif level >= logging.ERROR:
                # Reported through the raised SteamUploadError
                error_lines.append(message)
                logger.debug(message)
            else:
                logger.log(level, message)

    reader = threading.Thread(target=relay, daemon=True)
    reader.start()

    try:
        exit_code = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        _terminate(process)
        raise SteamUploadError(
            f"Upload timed out after {timeout} seconds",
            [
                "Check your internet connection",
                "Increase the limit with --timeout",
                "Re-run the command; the Workshop item ID is kept in info.ini",
            ],
        ) from e
    except KeyboardInterrupt:
        _terminate(process)
        raise
    finally:
        reader.join(timeout=TERMINATE_GRACE)

    if exit_code != 0:
        message, suggestions = split_worker_errors(error_lines)
        raise SteamUploadError(message or f"Upload process exited with code {exit_code}", suggestions)
