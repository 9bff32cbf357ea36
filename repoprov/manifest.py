"""
Manifest loading for repoprov.

The manifest maps repository identities to their locators:

    {
      "repositories": {
        "demo": {
          "link": "git@example/demo.git",
          "httpsLink": "https://example/demo.git"
        }
      }
    }

Loading never raises. Read and parse failures come back as a diagnostic
on an empty ManifestResult, and malformed entries are listed by identity.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .domain import ManifestResult, RepositoryDeclaration


def _parse(path: Path, text: str) -> Any:
    if path.suffix.lower() in ('.yaml', '.yml'):
        return yaml.safe_load(text)
    return json.loads(text)


def load_manifest(path: Union[str, Path]) -> ManifestResult:
    """
    Load repository declarations from a manifest file.

    Args:
        path: Manifest file (JSON, or YAML by suffix)

    Returns:
        ManifestResult; empty with a diagnostic on any read/parse failure
    """
    path = Path(path).expanduser()
    shown = str(path)

    try:
        text = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        return ManifestResult(path=shown, diagnostic=f"manifest not found: {shown}")
    except (OSError, UnicodeDecodeError) as e:
        return ManifestResult(path=shown, diagnostic=f"could not read {shown}: {e}")

    try:
        document = _parse(path, text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        return ManifestResult(path=shown, diagnostic=f"could not parse {shown}: {e}")

    if not isinstance(document, dict):
        return ManifestResult(path=shown, diagnostic=f"{shown}: top level is not an object")

    entries = document.get('repositories') or {}
    if not isinstance(entries, dict):
        return ManifestResult(path=shown, diagnostic=f"{shown}: 'repositories' is not an object")

    declarations: Dict[str, RepositoryDeclaration] = {}
    malformed: List[str] = []
    for identity, entry in entries.items():
        declaration = RepositoryDeclaration.from_entry(identity, entry)
        if declaration is None:
            malformed.append(str(identity))
            continue
        declarations[identity] = declaration

    return ManifestResult(
        path=shown,
        declarations=declarations,
        malformed=tuple(malformed),
    )
