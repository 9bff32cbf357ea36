"""
Capability probing of an optional external library.

The library checkout may be absent, or present without its own
dependencies. Either way the probe reports "skipped" rather than "failed";
only a module that loads and then does not match its declared surface
fails.
"""

import importlib
import inspect
import string
import sys
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union
import logging

from ..domain import (
    BUILTIN_SURFACES,
    ExpectedSurface,
    MemberKind,
    ProbeResult,
    SurfaceMember,
)

logger = logging.getLogger(__name__)

_MISSING = object()
_HEX = set(string.hexdigits.lower())


class _Skip(Exception):
    """Raised inside a probe when a call hits a missing dependency."""


def _looks_like_path(module_path: str) -> bool:
    return '/' in module_path or '\\' in module_path or module_path.endswith('.py') \
        or Path(module_path).exists()


def _resolve_source(path: Path) -> Optional[Path]:
    """Map a module path to a .py file or a package directory."""
    if path.is_dir() and (path / '__init__.py').is_file():
        return path
    if path.suffix == '.py' and path.is_file():
        return path
    candidate = path.with_name(path.name + '.py')
    if candidate.is_file():
        return candidate
    return None


def _dotted_name(source: Path) -> Tuple[Path, str]:
    """
    Work out the import root and dotted name for a source path by walking
    up through enclosing packages.
    """
    parts = [source.stem if source.is_file() else source.name]
    parent = source.parent
    while (parent / '__init__.py').is_file():
        parts.insert(0, parent.name)
        parent = parent.parent
    return parent, '.'.join(parts)


@contextmanager
def _sys_path(entry: Path):
    entry_str = str(entry)
    sys.path.insert(0, entry_str)
    try:
        yield
    finally:
        try:
            sys.path.remove(entry_str)
        except ValueError:
            pass


@contextmanager
def _package_scope(top: str):
    """
    Hide cached modules of package `top` for the duration of the block,
    then put sys.modules back the way it was.
    """
    names = [name for name in sys.modules if name == top or name.startswith(top + '.')]
    saved = {name: sys.modules.pop(name) for name in names}
    try:
        yield
    finally:
        for name in [n for n in sys.modules if n == top or n.startswith(top + '.')]:
            del sys.modules[name]
        sys.modules.update(saved)


@contextmanager
def load_module_reference(module_path: Union[str, Path]):
    """
    Import a module given a dotted name or a filesystem path.

    A path is imported fresh from its package root; on exit the modules
    it loaded are dropped and any same-named modules cached before are
    restored.

    Raises:
        ImportError: the module, or something it imports, is absent
    """
    text = str(module_path)
    if not _looks_like_path(text):
        yield importlib.import_module(text)
        return

    source = _resolve_source(Path(text).expanduser().resolve())
    if source is None:
        raise ModuleNotFoundError(f"No module found at {text}")

    root, dotted = _dotted_name(source)
    top = dotted.split('.')[0]
    if top in sys.stdlib_module_names:
        raise ImportError(f"{top} at {root} would shadow the standard library module")

    with _package_scope(top), _sys_path(root):
        importlib.invalidate_caches()
        yield importlib.import_module(dotted)


def _matches_kind(value: Any, kind: MemberKind) -> bool:
    if value is _MISSING:
        return False
    if kind == MemberKind.CONSTRUCTIBLE:
        return inspect.isclass(value)
    if kind == MemberKind.CALLABLE:
        return callable(value)
    return value is not None


def _call(func, *args, **kwargs):
    """Call into the probed module; a missing dependency becomes a skip."""
    try:
        return func(*args, **kwargs), None
    except ImportError as e:
        raise _Skip(str(e)) from e
    except Exception as e:
        return None, f"{type(e).__name__}: {e}"


class CapabilityProbe:
    """
    Walks a declared surface against a loaded module.

    Example:
        probe = CapabilityProbe()
        result = probe.probe("fabric", LIBRARY_SURFACE)
        if result.skipped:
            print("library not installed:", result.reason)
    """

    def _check_members(
        self,
        result: ProbeResult,
        owner: Any,
        members: Iterable[SurfaceMember],
        prefix: str
    ) -> None:
        for member in members:
            value = getattr(owner, member.name, _MISSING)
            if value is _MISSING:
                result.add(f"{prefix}.{member.name}", False, "missing")
                continue
            ok = _matches_kind(value, member.kind)
            result.add(f"{prefix}.{member.name}", ok, None if ok else f"not {member.kind.value}")

    def probe(self, module_path: Union[str, Path], surface: ExpectedSurface) -> ProbeResult:
        """
        Probe one surface.

        Args:
            module_path: Dotted module name, or path to a .py file or package
            surface: Declared surface to walk

        Returns:
            ProbeResult (skipped if the module cannot be loaded)
        """
        result = ProbeResult(surface=surface.name, module_path=str(module_path))

        with ExitStack() as stack:
            try:
                module = stack.enter_context(load_module_reference(module_path))
            except ImportError as e:
                logger.debug(f"Skipping {surface.name} probe: {e}")
                return result.skip(f"not loadable: {e}")
            return self._walk(result, module, surface)

    def _walk(self, result: ProbeResult, module: Any, surface: ExpectedSurface) -> ProbeResult:
        root = getattr(module, surface.export, _MISSING)
        constructible = inspect.isclass(root)
        if not result.add(surface.export, constructible, None if constructible else "missing or not constructible"):
            return result

        self._check_members(result, root, surface.static_members, surface.export)

        try:
            for check in surface.hash_checks:
                self._check_hash(result, root, surface.export, check)
            if surface.instance is not None:
                self._check_instance(result, root, surface)
            if surface.factory is not None:
                self._check_factory(result, root, surface)
        except _Skip as e:
            logger.debug(f"Skipping {surface.name} probe: {e}")
            return result.skip(f"dependency missing: {e}")

        return result

    def _check_hash(self, result: ProbeResult, root: Any, prefix: str, check) -> None:
        name = f"{prefix}.{check.function}({check.sample!r})"
        func = getattr(root, check.function, None)
        if not callable(func):
            result.add(name, False, "not callable")
            return
        digest, error = _call(func, check.sample)
        if error:
            result.add(name, False, error)
        elif not isinstance(digest, str):
            result.add(name, False, f"returned {type(digest).__name__}, expected str")
        elif len(digest) != check.length or not set(digest) <= _HEX:
            result.add(name, False, f"expected {check.length} lowercase hex characters, got {digest!r}")
        else:
            result.add(name, True)

    def _check_instance(self, result: ProbeResult, root: Any, surface: ExpectedSurface) -> None:
        spec = surface.instance
        instance, error = _call(root, **dict(spec.kwargs))
        if not result.add(f"{surface.export}()", error is None, error):
            return
        self._check_members(result, instance, spec.members, f"{surface.export}()")

    def _check_factory(self, result: ProbeResult, root: Any, surface: ExpectedSurface) -> None:
        spec = surface.factory
        factory = getattr(root, spec.factory, None)
        name = f"{surface.export}.{spec.factory}(...)"
        if not callable(factory):
            result.add(name, False, "not callable")
            return
        created, error = _call(factory, *spec.args)
        if error is None and created is None:
            error = "returned None"
        if not result.add(name, error is None, error):
            return
        self._check_members(result, created, spec.members, name)

    def probe_library(
        self,
        library_path: Union[str, Path],
        surfaces: Optional[Iterable[ExpectedSurface]] = None
    ) -> List[ProbeResult]:
        """
        Probe a library checkout against several surfaces.

        Each surface's `module` is resolved relative to library_path.
        """
        if surfaces is None:
            surfaces = BUILTIN_SURFACES.values()
        base = Path(library_path)
        results = []
        for surface in surfaces:
            target = base / surface.module if surface.module else base
            results.append(self.probe(target, surface))
        return results
