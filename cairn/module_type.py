"""Kinds of translation units and the source definitions built from them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ModuleType(Enum):
    """What a source file declares itself to be."""

    INTERFACE = "interface"
    """Has ``export module Name;``."""
    IMPLEMENTATION = "implementation"
    """Has ``module Name;``."""
    PARTITION = "partition"
    """Produces both a BMI and an object; importable but treated as implementation."""
    SOURCE = "source"
    """Ordinary source file that is not a module but may import modules."""
    SYSTEM_HEADER = "system_header"
    """Precompiled system header unit."""
    USER_HEADER = "user_header"
    """Precompiled user header unit."""

    def __str__(self) -> str:
        return self.value


def generates_bmi(t: ModuleType) -> bool:
    """Return True when compiling a unit of this type produces a BMI."""
    return t in (
        ModuleType.USER_HEADER,
        ModuleType.SYSTEM_HEADER,
        ModuleType.PARTITION,
        ModuleType.INTERFACE,
    )


def generates_object(t: ModuleType) -> bool:
    """Return True when compiling a unit of this type produces an object file."""
    return t in (
        ModuleType.IMPLEMENTATION,
        ModuleType.SOURCE,
        ModuleType.INTERFACE,
        ModuleType.PARTITION,
    )


def is_header_module(t: ModuleType) -> bool:
    """Return True for header units."""
    return t in (ModuleType.USER_HEADER, ModuleType.SYSTEM_HEADER)


@dataclass(frozen=True)
class SourceDef:
    """A compiled module: its type, logical name and the file it comes from."""

    type: ModuleType
    name: str
    path: Path

    def __hash__(self) -> int:
        return hash(self.name)