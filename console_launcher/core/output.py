# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Output

Colour handling and the listeners that print test trees and execution events.
Colours are purely cosmetic: they are used only when not disabled and the
target stream is a terminal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, TextIO, Tuple

from .engine import ExecutionListener, TestDescriptor, TestExecutionResult, TestStatus


class Details(Enum):
    """How much is printed while tests are listed or executed."""

    NONE = "none"
    SUMMARY = "summary"
    FLAT = "flat"
    TREE = "tree"


class Colors:
    """ANSI escape codes."""

    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    END = "\033[0m"


def supports_color(stream: TextIO, disabled: bool = False) -> bool:
    if disabled:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Painter:
    """Wraps text in colour codes when enabled."""

    def __init__(self, enabled: bool):
        self.enabled = enabled

    def paint(self, text: str, color: str) -> str:
        if not self.enabled:
            return text
        return f"{color}{text}{Colors.END}"

    @classmethod
    def for_stream(cls, stream: TextIO, disabled: bool = False) -> "Painter":
        return cls(supports_color(stream, disabled))


@dataclass(frozen=True)
class Theme:
    blank: str
    vertical: str
    entry: str
    last_entry: str
    successful: str
    failed: str
    aborted: str
    skipped: str

    @classmethod
    def for_stream(cls, stream: TextIO) -> "Theme":
        encoding = (getattr(stream, "encoding", None) or "utf-8").lower()
        return UNICODE if encoding.replace("-", "").startswith("utf") else ASCII


UNICODE = Theme("   ", "│  ", "├─ ", "└─ ", "✔", "✘", "■", "↷")
ASCII = Theme("   ", "|  ", "+-- ", "'-- ", "[OK]", "[X]", "[A]", "[S]")


def _exception_line(throwable: Optional[BaseException]) -> str:
    if throwable is None:
        return ""
    lines = str(throwable).strip().splitlines()
    message = lines[0] if lines else ""
    return f"{type(throwable).__name__}: {message}" if message else type(throwable).__name__


class TreeRenderer:
    """Renders descriptor trees, optionally annotated with execution results."""

    def __init__(self, out: TextIO, painter: Painter, theme: Theme):
        self.out = out
        self.painter = painter
        self.theme = theme

    def render(
        self,
        roots: List[TestDescriptor],
        results: Optional[Dict[str, Tuple[str, object]]] = None,
    ):
        self.out.write(".\n")
        for index, root in enumerate(roots):
            self._render_node(root, "", index == len(roots) - 1, results)

    def _marker(self, descriptor: TestDescriptor, results) -> Tuple[str, List[str]]:
        if results is None:
            return "", []
        kind, value = results.get(descriptor.unique_id, ("pending", None))
        theme, paint = self.theme, self.painter.paint
        if kind == "skipped":
            return " " + paint(theme.skipped, Colors.YELLOW), [f"Skipped: {value}"]
        if kind != "finished":
            return "", []
        if value.status is TestStatus.SUCCESSFUL:
            return " " + paint(theme.successful, Colors.GREEN), []
        if value.status is TestStatus.ABORTED:
            return " " + paint(theme.aborted, Colors.YELLOW), [_exception_line(value.throwable)]
        return " " + paint(theme.failed, Colors.RED), [_exception_line(value.throwable)]

    def _render_node(self, descriptor, prefix, is_last, results):
        connector = self.theme.last_entry if is_last else self.theme.entry
        marker, notes = self._marker(descriptor, results)
        name = descriptor.display_name
        if descriptor.is_container:
            name = self.painter.paint(name, Colors.CYAN)
        self.out.write(f"{prefix}{connector}{name}{marker}\n")
        child_prefix = prefix + (self.theme.blank if is_last else self.theme.vertical)
        for note in notes:
            if note:
                self.out.write(f"{child_prefix}   => {note}\n")
        for index, child in enumerate(descriptor.children):
            self._render_node(child, child_prefix, index == len(descriptor.children) - 1, results)


class TreePrintingListener(ExecutionListener):
    """Collects results and prints the annotated tree once the plan finishes."""

    def __init__(self, out: TextIO, painter: Painter, theme: Optional[Theme] = None):
        self.renderer = TreeRenderer(out, painter, theme or Theme.for_stream(out))
        self.results: Dict[str, Tuple[str, object]] = {}

    def execution_skipped(self, descriptor, reason):
        self.results[descriptor.unique_id] = ("skipped", reason)

    def execution_finished(self, descriptor, result):
        self.results[descriptor.unique_id] = ("finished", result)

    def testplan_execution_finished(self, roots):
        self.renderer.render(roots, self.results)


class FlatPrintingListener(ExecutionListener):
    """Prints one line per execution event as it happens."""

    def __init__(self, out: TextIO, painter: Painter):
        self.out = out
        self.painter = painter

    def _line(self, label: str, descriptor: TestDescriptor, color: str, note: str = ""):
        text = f"{label:<12}{descriptor.display_name} ({descriptor.unique_id})"
        self.out.write(self.painter.paint(text, color) + "\n")
        if note:
            self.out.write(f"{'':<12}=> {note}\n")

    def testplan_execution_started(self, roots):
        self.out.write(f"Test execution started. Number of static tests: "
                       f"{sum(root.count_tests() for root in roots)}\n")

    def testplan_execution_finished(self, roots):
        self.out.write("Test execution finished.\n")

    def execution_started(self, descriptor):
        self._line("Started:", descriptor, Colors.BLUE)

    def execution_skipped(self, descriptor, reason):
        self._line("Skipped:", descriptor, Colors.YELLOW, f"Reason: {reason}")

    def execution_finished(self, descriptor, result: TestExecutionResult):
        if result.status is TestStatus.SUCCESSFUL:
            self._line("Finished:", descriptor, Colors.GREEN)
        elif result.status is TestStatus.ABORTED:
            self._line("Aborted:", descriptor, Colors.YELLOW, _exception_line(result.throwable))
        else:
            self._line("Failed:", descriptor, Colors.RED, _exception_line(result.throwable))


__all__ = [
    "Details",
    "Colors",
    "Painter",
    "Theme",
    "UNICODE",
    "ASCII",
    "supports_color",
    "TreeRenderer",
    "TreePrintingListener",
    "FlatPrintingListener",
]
