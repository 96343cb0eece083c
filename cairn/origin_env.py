"""Where a set of sources came from and the settings they are compiled with."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ModuleMapItem:
    """Directories searched for modules whose names start with ``prefix``."""

    prefix: str
    paths: list[Path] = field(default_factory=list)


@dataclass
class OriginEnv:
    """The configuration a group of sources was loaded from."""

    config_file: Path = field(default_factory=Path)
    """The configuration file, or the scanned directory."""
    working_dir: Path = field(default_factory=Path)
    """Directory the compiler runs in."""
    settings_hash: int = 0
    """Hash of the settings; a change means the sources must be recompiled."""
    includes: list[Path] = field(default_factory=list)
    """Additional include directories."""
    options: list[str] = field(default_factory=list)
    """Other compiler options."""
    maps: list[ModuleMapItem] = field(default_factory=list)
    """Module name prefixes and the directories that hold them."""

    @classmethod
    def default_env(cls) -> "OriginEnv":
        """An environment rooted at the current directory with no settings."""
        cur = Path.cwd()
        return cls(config_file=cur, working_dir=cur)