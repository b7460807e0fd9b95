from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import ParseError
from ..model import Coordinate
from .namespaces import REL_ID_ATTR
from .streaming import SheetSource, iter_elements
from .utils import iter_cells_in_range, parse_range_ref

if TYPE_CHECKING:
    from ..package import RelationshipLookup

logger = logging.getLogger(__name__)


def _relationship_id(attrib: dict[str, str]) -> str | None:
    return attrib.get(REL_ID_ATTR) or attrib.get("id")


def extract_hyperlinks(source: SheetSource, relationships: RelationshipLookup | None) -> dict[Coordinate, str]:
    """Map each linked coordinate to the target URL of its relationship.

    Links that only carry an internal ``location``, or whose id is unknown to
    ``relationships``, are left out.
    """
    links: dict[Coordinate, str] = {}
    if relationships is None:
        return links

    for hyperlink in iter_elements(source, "hyperlink"):
        ref = hyperlink.attrib.get("ref")
        rid = _relationship_id(hyperlink.attrib)
        if not ref or not rid:
            continue
        target = relationships.target(rid)
        if target is None:
            logger.debug("Dropping hyperlink %s: unknown relationship %s", ref, rid)
            continue
        try:
            rng = parse_range_ref(ref)
        except ParseError:
            logger.debug("Dropping hyperlink with malformed ref %r", ref)
            continue
        for coordinate in iter_cells_in_range(rng):
            links[coordinate] = target

    return links
