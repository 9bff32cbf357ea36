"""
Git client infrastructure for repoprov.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import asyncio
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, List, Tuple
import logging

from ..exit_codes import FetchUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class CloneOutcome:
    """Result of a git clone invocation."""
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        if client.available():
            outcome = await client.clone(url, "/tmp/demo-repository", depth=1)
    """

    def __init__(self, timeout: int = 600, executable: str = "git"):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 600)
            executable: Name or path of the git binary
        """
        self.timeout = timeout
        self.executable = executable

    def available(self) -> bool:
        """Check whether git can be run in this environment."""
        return shutil.which(self.executable) is not None

    def require(self) -> str:
        """Resolve the git binary or raise FetchUnavailableError."""
        resolved = shutil.which(self.executable)
        if resolved is None:
            raise FetchUnavailableError(f"{self.executable} is not installed")
        return resolved

    def _run(self, args: List[str], cwd: str) -> Tuple[Optional[str], int]:
        """
        Run a git command synchronously.

        Returns:
            Tuple of (stdout, returncode); returncode is -1 on timeout
            or when git cannot be started
        """
        cmd = [self.executable] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
            output = result.stdout
            return output.strip() if output else None, result.returncode
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

    def check_is_repo(self, path: str) -> bool:
        """Ask git whether path is inside a work tree."""
        output, code = self._run(["rev-parse", "--is-inside-work-tree"], cwd=path)
        return code == 0 and output == "true"

    def head_commit(self, path: str) -> Optional[str]:
        """Get the commit hash at HEAD."""
        output, code = self._run(["rev-parse", "HEAD"], cwd=path)
        if code == 0 and output:
            return output
        return None

    def remote_url(self, path: str, remote: str = "origin") -> Optional[str]:
        """Get remote URL or None if not found."""
        output, code = self._run(["config", "--get", f"remote.{remote}.url"], cwd=path)
        if code == 0 and output:
            return output
        return None

    async def clone(
        self,
        url: str,
        destination: str,
        depth: Optional[int] = 1
    ) -> CloneOutcome:
        """
        Clone url into destination.

        Args:
            url: Locator to clone from
            destination: Target directory (must not exist)
            depth: History depth; None for a full clone

        Returns:
            CloneOutcome with exit code and captured output

        Raises:
            FetchUnavailableError: git is not installed
        """
        git = self.require()
        args = [git, "clone"]
        if depth:
            args += ["--depth", str(depth)]
        args += ["--", url, destination]

        logger.debug(f"Running: {' '.join(args)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
                env=_non_interactive_env(),
            )
        except FileNotFoundError as e:
            raise FetchUnavailableError(f"{self.executable} could not be started: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            _kill(process)
            await process.wait()
            logger.warning(f"git clone timed out after {self.timeout}s: {url}")
            return CloneOutcome(returncode=-1, timed_out=True)
        except asyncio.CancelledError:
            # Reap git before the caller removes its half-written directory
            _kill(process)
            await process.wait()
            raise

        return CloneOutcome(
            returncode=process.returncode,
            stdout=stdout.decode(errors="replace").strip(),
            stderr=stderr.decode(errors="replace").strip(),
        )


def _kill(process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass


def _non_interactive_env():
    """Environment that keeps git from prompting for credentials."""
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env
