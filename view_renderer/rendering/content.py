"""Named content slots captured during one render call."""

from collections.abc import Callable, Iterator
from typing import Any

from markupsafe import Markup

DEFAULT_SLOT = "layout"


def _slot_key(name: Any) -> str:
    if name is None:
        return DEFAULT_SLOT
    return name if isinstance(name, str) else str(name)


def to_safe(content: Any) -> Markup:
    """Mark rendered output as safe for output.

    Already-safe values pass through untouched and None becomes empty, so
    nested captures are never escaped twice.
    """
    if content is None:
        return Markup("")
    if isinstance(content, Markup):
        return content
    return Markup(content)


def capture(block: Callable[..., Any], *args: Any) -> Markup:
    """Run a block and return its output as safe content."""
    return to_safe(block(*args))


class ContentStore:
    """Slot name to captured content, owned by a single render call.

    The default slot (``layout``) receives the primary template's output
    before the layout runs. Writing a slot twice keeps the last write.
    """

    def __init__(self):
        self._slots: dict[str, Markup] = {}

    def get(self, name: Any = None) -> Markup:
        """Content of a slot, empty when it was never captured."""
        return self._slots.get(_slot_key(name), Markup(""))

    def set(self, name: Any, content: Any) -> None:
        self._slots[_slot_key(name)] = to_safe(content)

    def __getitem__(self, name: Any) -> Markup:
        return self.get(name)

    def __setitem__(self, name: Any, content: Any) -> None:
        self.set(name, content)

    def __contains__(self, name: Any) -> bool:
        return _slot_key(name) in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"ContentStore(slots={list(self._slots)!r})"
