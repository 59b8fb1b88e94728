#!/usr/bin/env python3
"""
Safe shell command execution utilities.
Used for running the external tools: apigeecli, gsutil and zip.
"""

import subprocess
import logging
import shutil
from pathlib import Path
from typing import Callable, Tuple, Optional, List, Union

logger = logging.getLogger(__name__)

# Signature shared by run_command and the fakes used in tests
CommandRunner = Callable[..., Tuple[bool, str, str]]

def run_command(
    command: List[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[int] = None,
    redact: Optional[List[str]] = None
) -> Tuple[bool, str, str]:
    """
    Safely execute a command. Output is captured, never streamed.

    Args:
        command: Command and arguments as list
        cwd: Working directory for the command
        timeout: Command timeout in seconds, None waits forever
        redact: Values (tokens) to hide when the command is logged

    Returns:
        Tuple of (success, stdout, stderr)
    """
    printable = " ".join(command)
    for secret in redact or []:
        if secret:
            printable = printable.replace(secret, "****")

    try:
        logger.debug(f"Running command: {printable}" + (f" (cwd={cwd})" if cwd else ""))

        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout
        )

        stdout = result.stdout.strip() if result.stdout else ""
        stderr = result.stderr.strip() if result.stderr else ""

        if stdout:
            logger.debug(f"Command stdout: {stdout}")
        if stderr:
            logger.debug(f"Command stderr: {stderr}")

        return result.returncode == 0, stdout, stderr

    except subprocess.TimeoutExpired:
        error_msg = f"Command timed out after {timeout}s"
        logger.error(error_msg)
        return False, "", error_msg

    except OSError as e:
        # Missing binary, permission denied, bad cwd
        error_msg = f"Command execution error: {e}"
        logger.error(error_msg)
        return False, "", str(e)

def check_command_available(command: str) -> bool:
    """
    Check if a command is available in the system.

    Args:
        command: Command name to check

    Returns:
        True if command exists
    """
    return shutil.which(command) is not None
