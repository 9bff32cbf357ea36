"""
Provenance store for repoprov.

The store is optional. `open_provenance_store` returns either a working
FileProvenanceStore or an UnavailableProvenanceStore whose operations do
nothing, so callers check `store.available` once instead of guarding every
call. Failures that mean "the store is not there" are swallowed; anything
else is a defect and propagates.
"""

import time
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..domain import ProvenanceRecord, ProvisionedClone, RepositoryDeclaration
from ..exit_codes import StoreUnavailableError
from ..infra import FileStore

logger = logging.getLogger(__name__)

# Failures that mean the storage subsystem is absent or unusable
UNAVAILABLE_ERRORS = (StoreUnavailableError, ImportError, OSError)


def now_millis() -> int:
    return int(time.time() * 1000)


class ProvenanceStore:
    """Interface shared by the available and unavailable stores."""

    available = False

    def put(self, key: str, record: ProvenanceRecord) -> bool:
        raise NotImplementedError

    def get(self, key: str) -> Optional[ProvenanceRecord]:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class UnavailableProvenanceStore(ProvenanceStore):
    """Store variant used when persistence is disabled or cannot start."""

    def __init__(self, reason: str = "store disabled"):
        self.reason = reason

    def put(self, key: str, record: ProvenanceRecord) -> bool:
        return False

    def get(self, key: str) -> Optional[ProvenanceRecord]:
        return None

    def delete(self, key: str) -> bool:
        return False

    def keys(self) -> List[str]:
        return []


class FileProvenanceStore(ProvenanceStore):
    """Provenance records persisted in a JSON FileStore."""

    available = True

    def __init__(self, backend: FileStore):
        self.backend = backend

    @property
    def path(self) -> Path:
        return self.backend.path

    def put(self, key: str, record: ProvenanceRecord) -> bool:
        """Write a record, replacing any previous one for key."""
        try:
            self.backend.put(key, record.to_dict())
            return True
        except UNAVAILABLE_ERRORS as e:
            logger.debug(f"Provenance store unavailable, not recording {key}: {e}")
            return False

    def get(self, key: str) -> Optional[ProvenanceRecord]:
        try:
            data = self.backend.get(key)
        except UNAVAILABLE_ERRORS as e:
            logger.debug(f"Provenance store unavailable, cannot read {key}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return ProvenanceRecord.from_dict(data)

    def delete(self, key: str) -> bool:
        try:
            return self.backend.delete(key)
        except UNAVAILABLE_ERRORS as e:
            logger.debug(f"Provenance store unavailable, cannot delete {key}: {e}")
            return False

    def keys(self) -> List[str]:
        try:
            return self.backend.keys()
        except UNAVAILABLE_ERRORS as e:
            logger.debug(f"Provenance store unavailable: {e}")
            return []


def open_provenance_store(path: Union[str, Path], enabled: bool = True) -> ProvenanceStore:
    """
    Open the provenance store at path.

    Returns an UnavailableProvenanceStore when disabled or when the backing
    file cannot be created.
    """
    if not enabled:
        return UnavailableProvenanceStore("store disabled by configuration")
    try:
        return FileProvenanceStore(FileStore(Path(path)))
    except UNAVAILABLE_ERRORS as e:
        logger.debug(f"Provenance store at {path} unavailable: {e}")
        return UnavailableProvenanceStore(str(e))


class ProvenanceService:
    """
    Records how clones were produced.

    Example:
        service = ProvenanceService(open_provenance_store("stores/repositories.json"))
        stored = service.record(declaration, clone)
    """

    def __init__(self, store: Optional[ProvenanceStore] = None):
        self.store = store or UnavailableProvenanceStore()

    @property
    def available(self) -> bool:
        return self.store.available

    def build_record(self, declaration: RepositoryDeclaration, clone: ProvisionedClone) -> ProvenanceRecord:
        return ProvenanceRecord(
            link=declaration.link,
            https_link=declaration.https_link,
            cloned=clone.valid,
            path=clone.path,
            timestamp=now_millis(),
        )

    def record(self, declaration: RepositoryDeclaration, clone: ProvisionedClone) -> bool:
        """
        Persist provenance for a clone and confirm it reads back.

        Returns:
            True if the record was written and verified, False when the
            store is unavailable or did not retain the record
        """
        if not self.store.available:
            return False

        record = self.build_record(declaration, clone)
        if not self.store.put(clone.key, record):
            return False

        stored = self.store.get(clone.key)
        if stored is None:
            logger.debug(f"Provenance for {clone.key} did not read back")
            return False
        if stored.link != record.link or stored.cloned != record.cloned or not stored.path:
            logger.warning(f"Provenance for {clone.key} read back differently than written")
            return False
        return True

    def lookup(self, key: str) -> Optional[ProvenanceRecord]:
        return self.store.get(key)
