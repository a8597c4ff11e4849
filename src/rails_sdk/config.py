"""
Rails SDK - Configuration
=========================

Settings for the assembler and the emulator. Configuration can come from:
- Default values (defined here)
- Environment variables (``from_env``)
- Command-line flags (the CLI builds configs and overrides fields)

Environment variables
---------------------
    RAILS_TAG_MODE       "raw" or "emitted"
    RAILS_STRICT_TAGS    "1"/"true"/"yes" to reject undefined tags
    RAILS_MAX_STEPS      integer step budget for a run
    RAILS_CLEAR_SCREEN   "0"/"false"/"no" to keep console history
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import os

from rails_sdk.cpu import MAX_PROGRAM_LENGTH


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable, None if unset or unrecognised."""
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


class TagMode(Enum):
    """
    What a tag resolves to.

    RAW counts every source line, blank and comment lines included, so a
    tag followed by comments points past the instruction it labels.
    EMITTED points at the index of the next emitted instruction.
    """
    RAW = "raw"
    EMITTED = "emitted"


@dataclass
class AssemblerConfig:
    """
    Configuration for the assembler.

    Attributes:
        tag_mode: How tag targets are counted (default: raw line index)
        strict_tags: Raise UndefinedTagError instead of resolving to 0
        max_program_length: Most instructions a program may contain
    """
    tag_mode: TagMode = TagMode.RAW
    strict_tags: bool = False
    max_program_length: int = MAX_PROGRAM_LENGTH

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if tag_mode := os.environ.get("RAILS_TAG_MODE"):
            try:
                config.tag_mode = TagMode(tag_mode.strip().lower())
            except ValueError:
                pass

        strict = _env_flag("RAILS_STRICT_TAGS")
        if strict is not None:
            config.strict_tags = strict

        return config


@dataclass
class EmulatorConfig:
    """
    Configuration for the emulator.

    Attributes:
        max_steps: Instructions to execute before giving up (None: unlimited)
        clear_screen: Clear the console before each state dump
    """
    max_steps: Optional[int] = None
    clear_screen: bool = True

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if max_steps := os.environ.get("RAILS_MAX_STEPS"):
            try:
                value = int(max_steps)
            except ValueError:
                value = None
            if value is not None and value > 0:
                config.max_steps = value

        clear = _env_flag("RAILS_CLEAR_SCREEN")
        if clear is not None:
            config.clear_screen = clear

        return config
