"""Arrow-key selection list for interactive terminals."""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SelectorOption(Generic[T]):
    value: T
    label: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class SelectorResult(Generic[T]):
    action: Literal["select", "cancel"]
    value: T | None
    index: int


Key = Literal["up", "down", "enter", "cancel", "other"]


def is_interactive_terminal() -> bool:
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _color_enabled() -> bool:
    if not is_interactive_terminal():
        return False
    if os.getenv("NO_COLOR") is not None:
        return False
    return os.getenv("TERM", "").lower() != "dumb"


def _paint(text: str, *codes: str) -> str:
    if not _color_enabled() or not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _clear() -> None:
    sys.stdout.write("\x1b[2J\x1b[H")


def _read_key() -> Key:
    if os.name == "nt":
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x1b", "\x03"):
            return "cancel"
        if ch in ("\x00", "\xe0"):
            ch2 = msvcrt.getwch()
            if ch2 == "H":
                return "up"
            if ch2 == "P":
                return "down"
        return "other"

    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x03"):
            return "cancel"
        if ch in ("k", "K"):
            return "up"
        if ch in ("j", "J"):
            return "down"
        if ch == "\x1b":
            if sys.stdin.read(1) == "[":
                c3 = sys.stdin.read(1)
                if c3 == "A":
                    return "up"
                if c3 == "B":
                    return "down"
            return "cancel"
        return "other"
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _pad(text: str, width: int) -> str:
    if len(text) > width:
        text = text[: max(0, width - 3)] + "..." if width > 3 else text[:width]
    return text.ljust(width)


def _render(*, title: str, options: list[SelectorOption[object]], index: int) -> None:
    cols = max(60, min(140, shutil.get_terminal_size((100, 30)).columns))
    label_w = max(12, min(24, max(len(o.label) for o in options)))
    detail_w = max(20, cols - label_w - 10)

    _clear()
    print(_paint(title, "1", "96"))
    print()
    for i, opt in enumerate(options):
        marker = ">" if i == index else " "
        line = f"{marker} {_pad(opt.label, label_w)}  {_pad(opt.detail or '', detail_w)}"
        print(_paint(line, "1", "30", "46") if i == index else line)
    print()
    print(_paint("Up/Down + Enter to choose, q to cancel", "2", "37"))
    sys.stdout.flush()


def select_one(
    *,
    title: str,
    options: list[SelectorOption[T]],
    initial_index: int = 0,
) -> SelectorResult[T]:
    if not options:
        raise ValueError("selector requires at least one option")
    if not is_interactive_terminal():
        raise RuntimeError("interactive selector requires a TTY")

    idx = max(0, min(initial_index, len(options) - 1))
    casted: list[SelectorOption[object]] = [
        SelectorOption(value=o.value, label=o.label, detail=o.detail) for o in options
    ]

    while True:
        _render(title=title, options=casted, index=idx)
        match _read_key():
            case "up":
                idx = (idx - 1) % len(options)
            case "down":
                idx = (idx + 1) % len(options)
            case "enter":
                _clear()
                return SelectorResult(action="select", value=options[idx].value, index=idx)
            case "cancel":
                _clear()
                return SelectorResult(action="cancel", value=None, index=idx)
            case "other":
                pass
