"""Pull-based traversal of worksheet markup.

Nothing here builds a tree of the whole worksheet: ``iterparse`` hands over
one element at a time and every yielded element is cleared once the caller
resumes the generator.
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Callable, Iterator, Union
from xml.etree import ElementTree as ET

from ..errors import ParseError
from .utils import local_name

logger = logging.getLogger(__name__)

SheetSource = Union[str, Path, bytes, Callable[[], IO[bytes]]]


@contextmanager
def open_source(source: SheetSource) -> Iterator[IO[bytes]]:
    if isinstance(source, bytes):
        stream: IO[bytes] = io.BytesIO(source)
    elif isinstance(source, (str, Path)):
        stream = open(source, "rb")
    elif callable(source):
        stream = source()
    else:
        raise TypeError(f"Unsupported worksheet source: {type(source).__name__}")
    try:
        yield stream
    finally:
        stream.close()


def iter_elements(source: SheetSource, tag: str) -> Iterator[ET.Element]:
    """Yield every element named ``tag`` (namespace ignored) in document order.

    Each call reopens ``source`` and starts over. Closing the generator early
    closes the stream.
    """
    with open_source(source) as stream:
        try:
            for _event, elem in ET.iterparse(stream, events=("end",)):
                if local_name(elem.tag) != tag:
                    continue
                yield elem
                elem.clear()
        except ET.ParseError as exc:
            raise ParseError(f"Malformed worksheet markup: {exc}") from exc


def iter_rows(source: SheetSource) -> Iterator[ET.Element]:
    return iter_elements(source, "row")


def read_dimension(source: SheetSource) -> str | None:
    elements = iter_elements(source, "dimension")
    try:
        for dimension in elements:
            return dimension.attrib.get("ref")
    finally:
        elements.close()
    logger.debug("Worksheet declares no dimension")
    return None
