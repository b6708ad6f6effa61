"""Markup sinks used by the report renderer."""

from abc import ABC, abstractmethod
from typing import TextIO


def escape_html(text: str) -> str:
    """Escape HTML special characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


class MarkupWriter(ABC):
    """Element-by-element markup output.

    Attributes may only be written directly after begin_element; the start tag
    is completed by the next text, child element or end_element call.
    """

    @abstractmethod
    def begin_element(self, tag: str) -> None: ...

    @abstractmethod
    def write_attribute(self, name: str, value: str) -> None: ...

    @abstractmethod
    def write_text(self, text: str) -> None: ...

    @abstractmethod
    def end_element(self, tag: str) -> None: ...

    @abstractmethod
    def write_line(self) -> None: ...


class HtmlMarkupWriter(MarkupWriter):
    """Writes escaped HTML to a text stream and checks element nesting."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._start_tag_open = False
        self._open_elements: list[str] = []

    @property
    def depth(self) -> int:
        return len(self._open_elements)

    def _close_start_tag(self) -> None:
        if self._start_tag_open:
            self._stream.write(">")
            self._start_tag_open = False

    def begin_element(self, tag: str) -> None:
        self._close_start_tag()
        self._stream.write(f"<{tag}")
        self._start_tag_open = True
        self._open_elements.append(tag)

    def write_attribute(self, name: str, value: str) -> None:
        if not self._start_tag_open:
            raise ValueError(f"Attribute '{name}' written outside of a start tag")
        self._stream.write(f' {name}="{escape_html(str(value))}"')

    def write_text(self, text: str) -> None:
        self._close_start_tag()
        self._stream.write(escape_html(text))

    def write_raw(self, markup: str) -> None:
        """Write trusted markup (document shell, stylesheet) without escaping."""
        self._close_start_tag()
        self._stream.write(markup)

    def end_element(self, tag: str) -> None:
        self._close_start_tag()
        if not self._open_elements or self._open_elements[-1] != tag:
            current = self._open_elements[-1] if self._open_elements else None
            raise ValueError(f"Cannot close <{tag}>, open element is <{current}>")
        self._open_elements.pop()
        self._stream.write(f"</{tag}>")

    def write_line(self) -> None:
        self._close_start_tag()
        self._stream.write("\n")
