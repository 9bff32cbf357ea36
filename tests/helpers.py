"""
Test helpers for repoprov: on-disk package layouts and a fake git client.
"""

import asyncio
import json
import textwrap
from pathlib import Path
from typing import Dict, Optional

from repoprov.exit_codes import FetchUnavailableError
from repoprov.infra import GitClient, CloneOutcome


def write_package(root: Path, name: str = "demo", main: Optional[str] = "index.js",
                  directories=(), descriptor: Optional[dict] = None) -> Path:
    """Lay out a minimal package at root."""
    root.mkdir(parents=True, exist_ok=True)
    data = descriptor if descriptor is not None else {"name": name}
    if descriptor is None and main is not None:
        data["main"] = main
    (root / "package.json").write_text(json.dumps(data))
    if main:
        entry = root / main
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.write_text("module.exports = {};\n")
    for directory in directories:
        (root / directory).mkdir(parents=True, exist_ok=True)
    return root


class FakeGitClient(GitClient):
    """
    GitClient stand-in that "clones" by writing a package on disk.

    Remotes maps an https locator to the package layout to produce:
    {"name": ..., "main": ..., "directories": [...]}. Unknown locators
    fail like an unreachable remote.
    """

    def __init__(self, remotes: Optional[Dict[str, dict]] = None, available: bool = True,
                 delay: float = 0.0, drop_descriptor: bool = False):
        super().__init__(timeout=5)
        self.remotes = remotes or {}
        self.is_available = available
        self.delay = delay
        self.drop_descriptor = drop_descriptor
        self.clones = []

    def available(self) -> bool:
        return self.is_available

    def require(self) -> str:
        if not self.is_available:
            raise FetchUnavailableError("git is not installed")
        return "git"

    def check_is_repo(self, path: str) -> bool:
        return (Path(path) / ".git").is_dir()

    async def clone(self, url: str, destination: str, depth: Optional[int] = 1) -> CloneOutcome:
        self.require()
        self.clones.append((url, destination, depth))
        target = Path(destination)
        if target.exists() and any(target.iterdir()):
            return CloneOutcome(returncode=128, stderr=f"fatal: destination path '{destination}' already exists")
        if url not in self.remotes:
            return CloneOutcome(returncode=128, stderr=f"fatal: repository '{url}' not found")

        layout = self.remotes[url]
        target.mkdir(parents=True, exist_ok=True)
        (target / ".git").mkdir()
        if self.delay:
            await asyncio.sleep(self.delay)
        write_package(
            target,
            name=layout.get("name", "demo"),
            main=layout.get("main", "index.js"),
            directories=layout.get("directories", ()),
        )
        if self.drop_descriptor:
            (target / "package.json").unlink()
        return CloneOutcome(returncode=0)


def write_manifest(path: Path, repositories: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"repositories": repositories}))
    return path


LIBRARY_SOURCE = textwrap.dedent('''
    import hashlib
    import os

    class Service:
        pass

    class State:
        pass

    class Fabric:
        Service = Service
        State = State

        def __init__(self, settings=None):
            self.settings = settings or {}

        @staticmethod
        def sha256(value):
            return hashlib.sha256(str(value).encode()).hexdigest()

        @staticmethod
        def random():
            return os.urandom(32).hex()
''')

ACTOR_SOURCE = textwrap.dedent('''
    class Actor:
        def __init__(self, **settings):
            self.settings = dict(settings, type="Actor")
            self._state = {"content": {}}
            self._handlers = {}

        def on(self, event, handler):
            self._handlers.setdefault(event, []).append(handler)

        def emit(self, event, *args):
            for handler in self._handlers.get(event, []):
                handler(*args)
''')

MESSAGE_SOURCE = textwrap.dedent('''
    import json

    class Message:
        def __init__(self, kind, body):
            self.kind = kind
            self.body = body

        @classmethod
        def fromVector(cls, vector):
            kind, body = vector
            return cls(kind, json.loads(body))

        @classmethod
        def fromRaw(cls, raw):
            return cls("GenericMessage", json.loads(raw))

        def toObject(self):
            return {"type": self.kind, "data": self.body}

        def toRaw(self):
            return json.dumps(self.toObject()).encode()
''')


def write_library(root: Path, library=LIBRARY_SOURCE, actor=ACTOR_SOURCE, message=MESSAGE_SOURCE) -> Path:
    """Lay out a Python library checkout with the expected surface."""
    write_package(root, name="@fabric/core", main="index.js", directories=["services", "tests"])
    (root / "__init__.py").write_text(library)
    types_dir = root / "types"
    types_dir.mkdir(exist_ok=True)
    (types_dir / "__init__.py").write_text("")
    if actor is not None:
        (types_dir / "actor.py").write_text(actor)
    if message is not None:
        (types_dir / "message.py").write_text(message)
    return root
