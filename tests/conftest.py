"""
Rails SDK - Test Configuration
==============================

Shared fixtures:
- ScriptedConsole: a console that records output and replays canned input
- run_source: assemble a source string and run it on a scripted console
"""

from collections import deque
from typing import Callable, Iterable

import pytest

from rails_sdk.assembler import assemble
from rails_sdk.config import EmulatorConfig
from rails_sdk.emulator import Emulator, MachineState


class ScriptedConsole:
    """
    Console double for emulator tests.

    Attributes:
        output: Everything written with log(), in order
        prompts: Every prompt passed to get_input()
        clears: Number of clear() calls
    """

    def __init__(self, inputs: Iterable[str] = ()):
        self.inputs = deque(inputs)
        self.output: list[str] = []
        self.prompts: list[str] = []
        self.clears = 0

    def clear(self) -> None:
        self.clears += 1

    def log(self, text: str) -> None:
        self.output.append(text)

    def get_input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.inputs:
            raise AssertionError(f"unexpected prompt: {prompt!r}")
        return self.inputs.popleft()

    @property
    def text(self) -> str:
        return "".join(self.output)


@pytest.fixture
def console() -> ScriptedConsole:
    """Fixture: console with no scripted input."""
    return ScriptedConsole()


@pytest.fixture
def run_source() -> Callable[..., tuple[MachineState, ScriptedConsole]]:
    """
    Fixture: assemble and run a program.

    Usage:
        state, console = run_source("IMM r1 4\\nEXIT", inputs=["7"])
    """
    def _run(source: str, inputs: Iterable[str] = (),
             config: EmulatorConfig | None = None):
        console = ScriptedConsole(inputs)
        state = Emulator(console=console, config=config).run(assemble(source))
        return state, console

    return _run
