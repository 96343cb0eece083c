"""Loading module maps from directories and ``modules.yaml`` files."""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import yaml

from cairn.hashing import hash_combine
from cairn.log import Log
from cairn.origin_env import ModuleMapItem, OriginEnv

PathArg = Union[str, "os.PathLike[str]"]

MODULES_YAML = "modules.yaml"
_SOURCE_EXTENSIONS = frozenset({".cpp", ".cppm", ".ixx"})

log = Log()


@dataclass
class ResolverResult:
    """Sources, build targets and environment found for one origin.

    Each target is a pair of paths as given in the configuration: the key
    first, the value second.
    """

    files: list[Path] = field(default_factory=list)
    targets: list[tuple[Path, Path]] = field(default_factory=list)
    env: OriginEnv = field(default_factory=OriginEnv)


def _stable_hash(text: str) -> int:
    digest = hashlib.blake2b(text.encode("utf-8", "surrogateescape"), digest_size=8).digest()
    return int.from_bytes(digest, "little")


def _calculate_hash(result: ResolverResult) -> None:
    env = result.env
    h = _stable_hash(os.fspath(env.working_dir))
    for path in env.includes:
        h = hash_combine(h, _stable_hash(os.fspath(path)))
    for option in env.options:
        h = hash_combine(h, _stable_hash(option))
    env.settings_hash = h


def _normalize(base: Path, relative: str) -> Path:
    return Path(os.path.normpath(base / relative))


def _as_str(node: Any, what: str) -> str:
    if not isinstance(node, str):
        raise TypeError(f"`{what}` must contain strings, got {node!r}")
    return node


def scan_directory(directory: PathArg) -> ResolverResult:
    """List the module sources in a directory; each subdirectory becomes a prefix."""
    directory = Path(directory)
    log.debug("Scanning directory {}", lambda: str(directory))
    out = ResolverResult()
    for entry in sorted(directory.iterdir()):
        if entry.is_file():
            if entry.suffix.lower() in _SOURCE_EXTENSIONS:
                out.files.append(entry)
        elif entry.is_dir():
            out.env.maps.append(ModuleMapItem(entry.name, [entry]))
    out.env.config_file = directory
    out.env.working_dir = directory
    _calculate_hash(out)
    return out


def _read_yaml(yaml_file: Path) -> ResolverResult:
    result = ResolverResult()
    result.env.config_file = yaml_file
    result.env.working_dir = yaml_file.parent

    try:
        text = yaml_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise OSError(f"Can't open YAML file:{yaml_file}") from exc
    root = yaml.safe_load(text)
    if root is None:
        root = {}
    if not isinstance(root, dict):
        raise TypeError("the document must be a key-value mapping")

    files = root.get("files")
    includes = root.get("includes")
    options = root.get("options")
    prefixes = root.get("prefixes")
    work_dir = root.get("work_dir")
    targets = root.get("targets")

    if work_dir is not None:
        if not isinstance(work_dir, str):
            raise TypeError("`work_dir` must be a path")
        result.env.working_dir = _normalize(result.env.working_dir, work_dir)
    base = result.env.working_dir

    if files is not None:
        if not isinstance(files, list):
            raise TypeError("`files` must be a sequence")
        result.files = [_normalize(base, _as_str(x, "files")) for x in files]
    else:
        result.files = scan_directory(base).files

    if includes is not None:
        if not isinstance(includes, list):
            raise TypeError("`includes` must be a sequence")
        result.env.includes = [_normalize(base, _as_str(x, "includes")) for x in includes]

    if prefixes is not None:
        if not isinstance(prefixes, dict):
            raise TypeError("`prefixes` must be a key-value mapping")
        for key, value in prefixes.items():
            item = ModuleMapItem(_as_str(key, "prefixes"))
            values = value if isinstance(value, list) else [value]
            item.paths = [_normalize(base, _as_str(x, "prefixes")) for x in values]
            result.env.maps.append(item)

    if options is not None:
        if not isinstance(options, list):
            raise TypeError("`options` must be a sequence")
        result.env.options = [_as_str(x, "options") for x in options]

    if targets is not None:
        if not isinstance(targets, dict):
            raise TypeError("`targets` must be a key-value mapping")
        for key, value in targets.items():
            result.targets.append(
                (_normalize(base, _as_str(key, "targets")), _normalize(base, _as_str(value, "targets")))
            )

    _calculate_hash(result)
    return result


def process_yaml(yaml_file: PathArg) -> ResolverResult:
    """Read a module configuration file.

    Paths in it are relative to the file's directory, or to ``work_dir`` when
    that is given. Without ``files`` the working directory is scanned.
    Raises ValueError naming the file when it cannot be read or is malformed.
    """
    yaml_file = Path(yaml_file)
    try:
        return _read_yaml(yaml_file)
    except Exception as exc:
        raise ValueError(f"Failed to parse: {yaml_file}: {exc}") from exc


def load_map(directory: PathArg) -> ResolverResult:
    """Load a directory's ``modules.yaml``, scan it if it has none, or read a given file."""
    directory = Path(directory)
    if directory.is_dir():
        cfg_file = directory / MODULES_YAML
        if not cfg_file.is_file():
            return scan_directory(directory)
    else:
        cfg_file = directory
    log.debug("Reading file {}", lambda: str(cfg_file))
    return process_yaml(cfg_file)


def detect_change(env: OriginEnv, threshold: float) -> bool:
    """True when the configuration changed after ``threshold`` (a timestamp) or is gone."""
    try:
        modified = os.stat(env.config_file).st_mtime
    except OSError:
        return True
    return modified > threshold


def match_prefix(prefix: str, name: str) -> bool:
    """Whether module ``name`` falls under ``prefix``.

    An empty prefix matches everything; a prefix ending in ``%`` matches any
    name starting with the rest; otherwise the name must equal the prefix or
    continue it with a ``.``.
    """
    if not prefix:
        return True
    if prefix.endswith("%"):
        return name.startswith(prefix[:-1])
    if prefix == name:
        return True
    return len(prefix) < len(name) and name.startswith(prefix) and name[len(prefix)] == "."