"""
This module provides a wrapper for running external command-line tools such as
`avifenc` and capturing their output for diagnostics.
"""

import os
import shlex
import subprocess
from typing import List, Optional

from loguru import logger


def display_command(cmd_list: List[str]) -> str:
    """Quotes and joins a command list the way the current platform's shell would."""
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def run_cmd(cmd_list: List[str], show_cmd: bool = False) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command and captures its combined output.

    stdout and stderr are merged into `CompletedProcess.stdout` so the caller
    gets the output in the order the tool wrote it. No timeout is applied.

    Args:
        cmd_list: The command and its arguments.
        show_cmd: If True, the command is logged at the DEBUG level before execution.

    Returns:
        A `subprocess.CompletedProcess` once the command has exited, whatever
        its return code. Returns `None` if the command could not be started
        (e.g., the executable vanished).
    """
    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    display_cmd_str = display_command(cmd_list)
    if show_cmd:
        logger.debug(f"Executing command: {display_cmd_str}")

    try:
        result = subprocess.run(
            cmd_list,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except FileNotFoundError:
        logger.error(
            f"Error: Command not found ('{cmd_list[0]}'). Ensure it's in your system's PATH or configured correctly."
        )
        return None
    except OSError as e:
        logger.error(f"Could not start command: {display_cmd_str}: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"Command output (rc={result.returncode}): {result.stdout}")
    elif result.stdout:
        logger.trace(f"Command output: {result.stdout}")
    return result
