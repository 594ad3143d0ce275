"""Builder and installer collaborators.

Both shell out to the configured package manager (pnpm by default). The
builder writes an unstamped tarball into the cache root; the installer
records a ``file:`` locator in the consumer project.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List

from common.logging_utils import Timer, extra_context, is_debug_enabled
from errors import BuildError, InstallError

logger = logging.getLogger(__name__)


def _run(cmd: List[str], cwd: str, action: str) -> subprocess.CompletedProcess:
    with Timer() as t:
        result = subprocess.run(  # noqa: S603
            cmd, cwd=cwd, capture_output=True, text=True, check=False
        )
    if is_debug_enabled(logger):
        logger.debug(
            "Collaborator finished",
            extra=extra_context(
                event="subprocess",
                component="package_manager",
                action=action,
                target=" ".join(cmd),
                status_code=result.returncode,
                duration_ms=t.duration_ms(),
            ),
        )
    return result


def _output(result: subprocess.CompletedProcess) -> str:
    return "\n".join(part.strip() for part in (result.stderr, result.stdout) if part and part.strip())


def build_tarball(builder_command: List[str], destination: str, cwd: str) -> None:
    """Pack the project in ``cwd`` into ``destination``.

    Args:
        builder_command: Command prefix; the destination is appended.
        destination: Output directory (the cache root).
        cwd: Producer project directory.

    Raises:
        BuildError: If the command cannot be started or exits non-zero.
    """
    cmd = list(builder_command) + [destination]
    logger.info("Running: %s", " ".join(cmd))
    try:
        result = _run(cmd, cwd, "build")
    except OSError as e:
        raise BuildError(f"Error running {cmd[0]}", output=str(e)) from e
    if result.returncode != 0:
        raise BuildError(
            f"Error running {' '.join(builder_command)}",
            output=_output(result),
            returncode=result.returncode,
        )


def install_locator(installer_command: List[str], locator: str, cwd: str) -> None:
    """Install ``locator`` into the consumer project in ``cwd``.

    Raises:
        InstallError: If the command cannot be started or exits non-zero.
    """
    cmd = list(installer_command) + [locator]
    logger.info("Running: %s", " ".join(cmd))
    try:
        result = _run(cmd, cwd, "install")
    except OSError as e:
        raise InstallError(f"Error running {cmd[0]}", output=str(e)) from e
    if result.returncode != 0:
        raise InstallError(
            f"Error running {' '.join(installer_command)}",
            output=_output(result),
            returncode=result.returncode,
        )
