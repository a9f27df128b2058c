"""Bulletin classification by JMA document naming convention."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from quake_relay.models import IndexEntry

logger = logging.getLogger(__name__)

# Document ids look like "20240101161018_20240101161010_VXSE53_1.json".
DETAILED_MARKER = "_VXSE53_"  # hypocenter and seismic intensity information
BASIC_MARKER = "_VXSE52_"  # hypocenter information


class BulletinKind(str, Enum):
    DETAILED = "detailed"
    BASIC = "basic"
    UNRECOGNIZED = "unrecognized"


def classify(document_id: str) -> BulletinKind:
    """Classify a bulletin from its document id alone (no I/O)."""
    if DETAILED_MARKER in document_id:
        return BulletinKind.DETAILED
    if BASIC_MARKER in document_id:
        return BulletinKind.BASIC
    return BulletinKind.UNRECOGNIZED


def partition(
    entries: Iterable[IndexEntry],
) -> tuple[list[IndexEntry], list[IndexEntry]]:
    """Split entries into ``(detailed, basic)``, preserving index order.

    Unrecognized entries are dropped.
    """
    detailed: list[IndexEntry] = []
    basic: list[IndexEntry] = []
    skipped = 0
    for entry in entries:
        kind = classify(entry.document_id)
        if kind is BulletinKind.DETAILED:
            detailed.append(entry)
        elif kind is BulletinKind.BASIC:
            basic.append(entry)
        else:
            skipped += 1

    logger.debug(
        "Classified bulletins: %d detailed, %d basic, %d skipped",
        len(detailed), len(basic), skipped,
    )
    return detailed, basic
