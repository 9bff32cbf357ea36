"""
Clone service for repoprov.

Materializes a clean, shallow clone of a declared repository at a
deterministic path. Every run starts from scratch: an existing directory
at the target path is removed before cloning, so interrupted or stale
clones never accumulate.
"""

import asyncio
import shutil
from pathlib import Path
from typing import Optional, Union
import logging

from ..domain import ProvisionedClone, clone_key
from ..exit_codes import ProvisioningError
from ..infra import GitClient

logger = logging.getLogger(__name__)


def _remove_tree(path: Path) -> None:
    """Remove a directory tree, or a stray file, at path."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


class CloneManager:
    """
    Provisions clones into a destination root.

    Example:
        manager = CloneManager()
        clone = await manager.provision(
            "demo", "git@example/demo.git", "https://example/demo.git",
            Path("stores/repositories"),
        )
        assert clone.valid
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        descriptor: str = "package.json",
        depth: int = 1
    ):
        self.git = git_client or GitClient()
        self.descriptor = descriptor
        self.depth = depth

    def clone_path(self, identity: str, destination_root: Union[str, Path]) -> Path:
        """
        Deterministic clone location for an identity.

        Raises:
            ProvisioningError: the identity does not name a directory
                directly under destination_root
        """
        root = Path(destination_root).expanduser().resolve()
        path = root / clone_key(identity)
        if path.parent != root or path.name != clone_key(identity):
            raise ProvisioningError(f"identity {identity!r} is not a plain directory name", identity)
        return path

    async def provision(
        self,
        identity: str,
        link: str,
        https_link: str,
        destination_root: Union[str, Path]
    ) -> ProvisionedClone:
        """
        Ensure a fresh shallow clone exists for identity.

        The fetch uses https_link; link is the canonical locator and is
        only recorded by callers.

        Raises:
            FetchUnavailableError: git is not installed (nothing is touched)
            ProvisioningError: the clone did not materialize correctly
        """
        self.git.require()

        path = self.clone_path(identity, destination_root)
        try:
            if path.exists() or path.is_symlink():
                logger.debug(f"Removing previous clone at {path}")
                _remove_tree(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProvisioningError(f"could not prepare {path}: {e}", identity) from e

        materialized = False
        try:
            outcome = await self.git.clone(https_link, str(path), depth=self.depth)
            if outcome.timed_out:
                raise ProvisioningError(f"clone of {https_link} timed out", identity)
            if not outcome.ok:
                detail = outcome.stderr.splitlines()[-1] if outcome.stderr else f"exit code {outcome.returncode}"
                raise ProvisioningError(f"clone of {https_link} failed: {detail}", identity)

            clone = ProvisionedClone.inspect(identity, path, self.descriptor)
            if not clone.exists:
                raise ProvisioningError(f"clone directory {path} was not created", identity)
            if not clone.has_vcs_marker:
                raise ProvisioningError(f"clone at {path} has no .git directory", identity)
            if not clone.has_descriptor:
                raise ProvisioningError(f"clone at {path} has no {self.descriptor}", identity)
            # check_is_repo blocks; keep it off the event loop
            if not await asyncio.to_thread(self.git.check_is_repo, str(path)):
                raise ProvisioningError(f"{path} is not a valid git work tree", identity)

            materialized = True
            logger.info(f"Provisioned {identity} at {path}")
            return clone
        finally:
            if not materialized:
                self._discard(path)

    def _discard(self, path: Path) -> None:
        """Best-effort removal of a half-written clone."""
        try:
            _remove_tree(path)
        except OSError as e:
            logger.warning(f"Could not remove partial clone at {path}: {e}")
