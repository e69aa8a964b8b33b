"""
Structured event stream over the XML asset formats.

The mesh and skeleton assets are consumed as a lazy, non-restartable sequence of
``ElementStart`` / ``ElementEnd`` events. ``EventCursor`` tracks nesting depth so
that a reader handed the start of an element can consume exactly that element's
children and stop after its end, leaving the rest of the stream to its caller.
"""

from typing import BinaryIO, Dict, Iterable, Iterator, NamedTuple, Union
from pathlib import Path
from xml.etree import ElementTree as ET

from .errors import FormatError, ParseError


Source = Union[str, Path, BinaryIO]


class ElementStart(NamedTuple):
    name: str
    attributes: Dict[str, str]


class ElementEnd(NamedTuple):
    name: str


Event = Union[ElementStart, ElementEnd]


def iter_events(source: Source) -> Iterator[Event]:
    """
    Stream start/end events from an XML source

    Args:
        source: File path or binary file object

    Yields:
        ElementStart and ElementEnd events in document order
    """
    if isinstance(source, Path):
        source = str(source)
    try:
        for kind, elem in ET.iterparse(source, events=("start", "end")):
            if kind == "start":
                yield ElementStart(elem.tag, dict(elem.attrib))
            else:
                yield ElementEnd(elem.tag)
                elem.clear()
    except ET.ParseError as e:
        raise ParseError(f"Malformed XML: {e}") from e


class EventCursor:
    """Iterator over an event stream that knows the current element depth"""

    def __init__(self, events: Iterable[Event]):
        self._events = iter(events)
        self.depth = 0

    def __iter__(self) -> 'EventCursor':
        return self

    def __next__(self) -> Event:
        event = next(self._events)
        if isinstance(event, ElementStart):
            self.depth += 1
        else:
            self.depth -= 1
        return event

    def scope(self) -> Iterator[Event]:
        """
        Yield the events nested inside the element whose start was just consumed.

        Iteration stops after the element's own end event has been consumed. Nested
        readers may pull from the cursor while a scope is suspended; depth stays
        consistent because it is tracked here rather than by the caller.
        """
        base = self.depth
        for event in self:
            if isinstance(event, ElementEnd) and self.depth < base:
                return
            yield event
        raise FormatError("Unexpected end of stream inside element")


def _require(attributes: Dict[str, str], element: str, key: str) -> str:
    value = attributes.get(key)
    if value is None:
        raise ParseError(f"<{element}> is missing attribute '{key}'")
    return value


def get_str(event: ElementStart, key: str) -> str:
    return _require(event.attributes, event.name, key)


def get_float(event: ElementStart, key: str) -> float:
    value = _require(event.attributes, event.name, key)
    try:
        return float(value)
    except ValueError as e:
        raise ParseError(f"<{event.name} {key}='{value}'> is not a number") from e


def get_int(event: ElementStart, key: str) -> int:
    value = _require(event.attributes, event.name, key)
    try:
        return int(value)
    except ValueError as e:
        raise ParseError(f"<{event.name} {key}='{value}'> is not an integer") from e
