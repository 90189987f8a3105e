# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Legend slot classification.

Label string slots:

    0-3   top legends (corners)
    4     front-left
    5     center, or front-center when it completes a front row
    6     front-right
    7     no meaning, when set on wide key with 9-11 slots the last three
          slots are front-left/center/right
    8     secondary center legend (9 when 8 is empty)
    9-11  front-left/center/right of wide keys (spacebars)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .options import HomingNubType

logger = logging.getLogger(__name__)

FRONT_SLOTS = (4, 5, 6)
CENTER_SLOTS = (8, 9)
WIDE_FRONT_SLOTS = (9, 10, 11)
WIDE_KEY_MIN_WIDTH = 2
FRONT_CENTER = 1
UNUSED_SLOT = 7

SIZE_TOKEN_RE = re.compile(r"^\s*\d+(?:\.\d+)?\s*u\s*$", re.IGNORECASE)
HOMING_MARKER_RE = re.compile(r"\b(SCOOP|BAR)\b", re.IGNORECASE)
HOMING_LEGENDS = {"SCOOP": "Scoop", "BAR": "Bar"}


@dataclass
class LegendClassification:
    labels: List[str]
    front_legends: Optional[List[str]] = None
    center_legend: Optional[str] = None
    # front legend index -> label slot it was taken from
    front_origins: Dict[int, int] = field(default_factory=dict, repr=False)


def _filled(labels: Sequence[str], slot: int) -> bool:
    return slot < len(labels) and bool(labels[slot].strip())


def is_size_token(legend: str) -> bool:
    return SIZE_TOKEN_RE.match(legend) is not None


def classify(slots: Sequence[str], width: float, decal: bool) -> LegendClassification:
    labels = ["" if slot is None else str(slot) for slot in slots]
    if decal:
        # decals keep all slots as ordinary labels (captions, LED indicators)
        return LegendClassification(labels)

    front = ["", "", ""]
    origins: Dict[int, int] = {}

    def _take(slot: int, index: int) -> None:
        front[index] = labels[slot]
        labels[slot] = ""
        origins[index] = slot

    wide = width >= WIDE_KEY_MIN_WIDTH
    slot_4_is_size = _filled(labels, 4) and is_size_token(labels[4])
    front_row = (_filled(labels, 4) or _filled(labels, 6)) and not slot_4_is_size

    # wide key with label string shorter than 12 slots: its last three slots
    # form the front row when front-left and front-center are unused and
    # slot 7, which has no meaning of its own, is filled
    tail_start = len(labels) - 3
    short_wide_row = (
        wide
        and FRONT_SLOTS[2] <= tail_start < WIDE_FRONT_SLOTS[0]
        and _filled(labels, UNUSED_SLOT)
        and not _filled(labels, 4)
        and not _filled(labels, 5)
    )
    if short_wide_row:
        for index in range(3):
            if _filled(labels, tail_start + index):
                _take(tail_start + index, index)

    if _filled(labels, FRONT_SLOTS[0]) and not front[0]:
        _take(FRONT_SLOTS[0], 0)
    if _filled(labels, FRONT_SLOTS[2]) and not front[2]:
        _take(FRONT_SLOTS[2], 2)
    if _filled(labels, FRONT_SLOTS[1]) and not front[1] and front_row:
        _take(FRONT_SLOTS[1], 1)

    if wide and not short_wide_row:
        for index, slot in enumerate(WIDE_FRONT_SLOTS):
            if not front[index] and _filled(labels, slot):
                _take(slot, index)

    center: Optional[str] = None
    for slot in CENTER_SLOTS:
        if _filled(labels, slot):
            center = labels[slot]
            labels[slot] = ""
            break

    return LegendClassification(
        labels,
        front_legends=front if any(front) else None,
        center_legend=center,
        front_origins=origins,
    )


def _strip_marker(legend: str, match: re.Match) -> str:
    before = legend[: match.start()].rstrip()
    after = legend[match.end() :].lstrip()
    return f"{before} {after}" if before and after else before + after


def _find_marker(legends: List[str]) -> Optional[str]:
    for i, legend in enumerate(legends):
        match = HOMING_MARKER_RE.search(legend) if legend else None
        if match:
            legends[i] = _strip_marker(legend, match)
            return HOMING_LEGENDS[match.group(1).upper()]
    return None


def apply_homing_nub(
    classification: LegendClassification, homing_nub_type: HomingNubType
) -> LegendClassification:
    """Moves SCOOP/BAR marker of homing key to front-center legend.

    Without a marker the legend is synthesized from `homing_nub_type`,
    front-center legend defined by the user always wins over synthesized one.
    """
    front = list(classification.front_legends or ["", "", ""])
    labels = list(classification.labels)
    origins = dict(classification.front_origins)
    center = [classification.center_legend or ""]

    marker = _find_marker(front) or _find_marker(labels) or _find_marker(center)
    synthesized = False
    if marker is None:
        marker = homing_nub_type.legend
        synthesized = True

    if marker:
        current = front[FRONT_CENTER]
        if not current or current == marker:
            front[FRONT_CENTER] = marker
            origins.pop(FRONT_CENTER, None)
        elif synthesized:
            logger.debug(
                f"Front-center legend '{current}' kept, homing legend not added"
            )
        else:
            slot = origins.get(FRONT_CENTER, FRONT_SLOTS[1])
            if slot < len(labels) and not labels[slot]:
                labels[slot] = current
                front[FRONT_CENTER] = marker
                origins.pop(FRONT_CENTER, None)
            else:
                logger.warning(
                    f"Homing legend '{marker}' dropped, front-center legend "
                    f"'{current}' has nowhere to go"
                )

    return LegendClassification(
        labels,
        front_legends=front if any(front) else None,
        center_legend=center[0] or None,
        front_origins=origins,
    )
