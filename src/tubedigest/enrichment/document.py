"""Composable summary document built from independently updated fragments."""

import threading
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

COMMENTS_HEADING = "\n\n💬 Comments Summary\n"
FACT_CHECK_HEADING = "\n\n🔍 Fact Check\n"


class FragmentSlot(Generic[T]):
    """A single value that is only ever replaced wholesale."""

    def __init__(self, value: T | None = None) -> None:
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> T | None:
        with self._lock:
            return self._value

    def set(self, value: T | None) -> None:
        with self._lock:
            self._value = value

    def compare_and_set(self, expected: T | None, value: T | None) -> bool:
        """Replace the value only if it is still ``expected``."""
        with self._lock:
            if self._value is not expected and self._value != expected:
                return False
            self._value = value
            return True


@dataclass(frozen=True)
class DocumentSnapshot:
    main: str
    comments: str | None = None
    fact_check: str | None = None


class SummaryDocument:
    """The main summary plus optional comments and fact-check fragments.

    Each fragment lives in its own slot so background stages can write
    without coordinating. Rendering always orders the sections main,
    comments, fact check, regardless of which stage finished first.
    """

    def __init__(self, main: str) -> None:
        self.main: FragmentSlot[str] = FragmentSlot(main)
        self.comments: FragmentSlot[str] = FragmentSlot()
        self.fact_check: FragmentSlot[str] = FragmentSlot()
        self._snapshot_lock = threading.Lock()

    def snapshot(self) -> DocumentSnapshot:
        with self._snapshot_lock:
            return DocumentSnapshot(
                main=self.main.get() or "",
                comments=self.comments.get(),
                fact_check=self.fact_check.get(),
            )

    def update(self, slot: FragmentSlot[str], value: str | None) -> None:
        """Set ``slot`` while no snapshot is being taken."""
        with self._snapshot_lock:
            slot.set(value)

    @staticmethod
    def compose(snapshot: DocumentSnapshot) -> str:
        parts = [snapshot.main]
        if snapshot.comments:
            parts.append(COMMENTS_HEADING + snapshot.comments)
        if snapshot.fact_check:
            parts.append(FACT_CHECK_HEADING + snapshot.fact_check)
        return "".join(parts)

    def render(self) -> str:
        return self.compose(self.snapshot())
