"""Execution channels of the virtual machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

INVALID_PC = -1
"""Program counter of a channel that has nothing to run."""

_INVALID_THRESHOLD = 0xFFFE


def pc_from_value(value: int) -> int:
    """Turn a raw bytecode offset into a program counter.

    Offsets of 0xFFFE and above mean "no program" and map to INVALID_PC.
    """
    if value >= _INVALID_THRESHOLD:
        return INVALID_PC
    return value


class State(Enum):
    READY = auto()
    RUNNING = auto()
    PAUSED = auto()
    DEAD = auto()


@dataclass
class Channel:
    """One cooperative thread of the virtual machine."""

    state: State = State.DEAD
    pc: int = INVALID_PC
    next_pc: int | None = None

    def reset(self) -> None:
        self.state = State.DEAD
        self.pc = INVALID_PC
        self.next_pc = None

    def set_pc(self, pc: int) -> None:
        """Point the channel at ``pc``; an invalid counter kills it."""
        self.pc = pc
        self.state = State.DEAD if pc == INVALID_PC else State.READY

    def apply_next_pc(self) -> None:
        """Apply a pending program-counter request, if any."""
        if self.next_pc is not None:
            self.set_pc(self.next_pc)
            self.next_pc = None

    def yield_control(self, execution_pc: int) -> None:
        """Stop running and resume at ``execution_pc`` on the next frame."""
        self.set_pc(execution_pc)