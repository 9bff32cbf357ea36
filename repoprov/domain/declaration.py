"""
Repository declaration domain objects for repoprov.

A declaration is one manifest entry: an identity plus the locators
used to fetch it. Declarations are immutable after load.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple, List

from ..config import CLONE_SUFFIX

# A single path component: no separators, no leading dot, not absolute
IDENTITY_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


def clone_key(identity: str) -> str:
    """Directory name and store key for an identity."""
    return f"{identity}{CLONE_SUFFIX}"


@dataclass(frozen=True)
class RepositoryDeclaration:
    """
    One declared repository.

    link is the canonical (SSH-style) locator; https_link is the
    fetch-friendly alternative actually used for cloning.
    """
    identity: str
    link: str
    https_link: str
    name: Optional[str] = None
    required_directories: Tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return clone_key(self.identity)

    @classmethod
    def from_entry(cls, identity: str, entry: Any) -> Optional['RepositoryDeclaration']:
        """
        Build a declaration from a raw manifest entry.

        Returns None for malformed entries (not a mapping, an identity
        that is not a safe directory name, or missing link or httpsLink).
        """
        if not isinstance(identity, str) or not IDENTITY_PATTERN.fullmatch(identity):
            return None
        if not isinstance(entry, dict):
            return None

        link = entry.get('link')
        https_link = entry.get('httpsLink')
        if not isinstance(link, str) or not link:
            return None
        if not isinstance(https_link, str) or not https_link:
            return None

        name = entry.get('name')
        dirs = entry.get('requiredDirectories') or []
        if not isinstance(dirs, list):
            dirs = []

        return cls(
            identity=identity,
            link=link,
            https_link=https_link,
            name=name if isinstance(name, str) else None,
            required_directories=tuple(str(d) for d in dirs),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'identity': self.identity,
            'key': self.key,
            'link': self.link,
            'httpsLink': self.https_link,
        }
        if self.name:
            result['name'] = self.name
        if self.required_directories:
            result['requiredDirectories'] = list(self.required_directories)
        return result


@dataclass(frozen=True)
class ManifestResult:
    """
    Outcome of loading a manifest.

    Loading never raises: a read or parse failure is carried in
    `diagnostic` alongside an empty mapping, and dropped entries are
    listed in `malformed`. The caller decides what to log.
    """
    path: str
    declarations: Dict[str, RepositoryDeclaration] = field(default_factory=dict)
    diagnostic: Optional[str] = None
    malformed: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.diagnostic is None

    def __len__(self) -> int:
        return len(self.declarations)

    def __iter__(self):
        return iter(self.declarations.values())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'type': 'manifest',
            'path': self.path,
            'count': len(self.declarations),
            'malformed': list(self.malformed),
        }
        if self.diagnostic:
            result['diagnostic'] = self.diagnostic
        return result

    def identities(self) -> List[str]:
        return list(self.declarations.keys())
