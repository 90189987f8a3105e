# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import json
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence, Set, Union

from .defaults import KEY_MAX_LABELS
from .kle_parser import (
    ROTATION_PROPERTIES,
    ParseCursor,
    get_layout_option,
    get_matrix_position,
)
from .legends import (
    CENTER_SLOTS,
    FRONT_CENTER,
    FRONT_SLOTS,
    HOMING_LEGENDS,
    WIDE_FRONT_SLOTS,
    WIDE_KEY_MIN_WIDTH,
)
from .model import Key, NormalizedLayout
from .options import HomingNubType

logger = logging.getLogger(__name__)

Row = List[Union[Dict[str, Any], str]]


def _round(value: Any) -> Any:
    return round(value, 6) if isinstance(value, float) else value


def _place(labels: List[str], slots: Sequence[int], legend: str) -> Optional[int]:
    for slot in slots:
        if not labels[slot]:
            labels[slot] = legend
            return slot
    return None


def export_labels(
    key: Key, homing_nub_type: HomingNubType = HomingNubType.SCOOP
) -> str:
    """Builds label string with front and center legends put back
    into label slots they would be classified from.

    Homing legend equal to the one synthesized for `homing_nub_type` is
    omitted, other homing legends are written as upper case marker.
    """
    labels = ["" if label is None else label for label in key.labels]
    length = len(labels)
    labels += (KEY_MAX_LABELS - len(labels)) * [""]

    front = (list(key.frontLegends or []) + 3 * [""])[0:3]
    marker = None
    if key.nub and front[FRONT_CENTER] in HOMING_LEGENDS.values():
        if front[FRONT_CENTER] != homing_nub_type.legend:
            marker = front[FRONT_CENTER].upper()
        front[FRONT_CENTER] = ""

    targets = FRONT_SLOTS
    wide = key.width >= WIDE_KEY_MIN_WIDTH
    if wide and front[FRONT_CENTER] and not front[0] and not front[2]:
        # lone front-center legend of wide key is recognized only on slot 10
        targets = WIDE_FRONT_SLOTS
        length = KEY_MAX_LABELS

    for index, legend in enumerate(front):
        if legend and _place(labels, [targets[index]], legend) is None:
            slot = _place(labels, range(KEY_MAX_LABELS), legend)
            logger.warning(
                f"Front legend '{legend}' moved to label slot {slot}, "
                f"slot {targets[index]} already in use"
            )

    if key.centerLegend:
        # slot 9 is read as front-left once wide key front slots are in use
        slots = CENTER_SLOTS[0:1] if targets is WIDE_FRONT_SLOTS else CENTER_SLOTS
        if _place(labels, slots, key.centerLegend) is None:
            slot = _place(labels, range(KEY_MAX_LABELS), key.centerLegend)
            logger.warning(
                f"Center legend '{key.centerLegend}' moved to label slot {slot}"
            )

    if marker:
        order = [*FRONT_SLOTS, *range(KEY_MAX_LABELS)]
        # prefer slots within original label count
        _place(labels, [s for s in order if s < length] + order, marker)

    last = max((i for i, label in enumerate(labels) if label), default=-1)
    return "\n".join(labels[0 : max(length, last + 1)])


def to_kle_rows(
    layout: NormalizedLayout, homing_nub_type: HomingNubType = HomingNubType.SCOOP
) -> List[Any]:
    """Serializes layout to rows of property objects and label strings.

    Every emitted property object is replayed on a ParseCursor, so only
    properties which differ from what the parser would assume are written.
    """
    rows: List[Any] = []
    row: Optional[Row] = None
    cursor = ParseCursor()

    metadata = layout.metadata.to_dict()
    if metadata:
        rows.append(metadata)

    for key in layout.keys:
        angle = key.rotation_angle or 0
        rx = (key.rotation_x or 0) if angle else cursor.rotation_x
        ry = (key.rotation_y or 0) if angle else cursor.rotation_y

        new_cluster = angle != cursor.rotation_angle or (
            angle and (rx != cursor.rotation_x or ry != cursor.rotation_y)
        )
        props: Dict[str, Any] = {}
        if row is None or new_cluster or _round(key.y) != cursor.y:
            row = []
            rows.append(row)
            cursor.start_row()
            if rx != cursor.rotation_x:
                props["rx"] = rx
            if ry != cursor.rotation_y:
                props["ry"] = ry
            if angle != cursor.rotation_angle:
                props["r"] = angle
            cursor.apply(props, first_in_row=True)

        def add_prop(name: str, value: Any, default: Any) -> None:
            value = _round(value)
            if value != _round(default):
                props[name] = value

        add_prop("x", round(key.x - cursor.x, 6), 0)
        add_prop("y", round(key.y - cursor.y, 6), 0)
        add_prop("c", key.color, cursor.color)
        add_prop("p", key.profile, cursor.profile)

        extra: Dict[str, Any] = {}
        default_color = key.default.textColor if key.default else None
        default_size = key.default.textSize if key.default else None
        if (default_color or None) != cursor.default_text_color:
            props["t"] = default_color or ""
        if (default_size or None) != cursor.default_text_size:
            props["f"] = default_size or 0
        if key.textColor:
            text_color = ["" if not c else c for c in key.textColor]
            if "t" in props:
                extra["t"] = text_color
            else:
                props["t"] = text_color
        if key.textSize:
            props["fa"] = [0 if not s else _round(s) for s in key.textSize]

        add_prop("w", key.width, 1)
        add_prop("h", key.height, 1)
        add_prop("x2", key.x2 or 0, 0)
        add_prop("y2", key.y2 or 0, 0)
        add_prop("w2", key.width2 or 0, 0)
        add_prop("h2", key.height2 or 0, 0)
        add_prop("g", key.ghost, False)
        add_prop("n", key.nub, False)
        add_prop("l", key.stepped, False)
        add_prop("d", key.decal, False)
        if key.align is not None:
            props["a"] = key.align

        cursor.apply(
            {k: v for k, v in props.items() if k not in ROTATION_PROPERTIES},
            first_in_row=True,
        )
        if props:
            row.append(props)
        if extra:
            cursor.apply(extra, first_in_row=True)
            row.append(extra)

        row.append(export_labels(key, homing_nub_type))
        cursor.next_key()

    return rows


def to_kle(
    layout: NormalizedLayout, homing_nub_type: HomingNubType = HomingNubType.SCOOP
) -> str:
    """Returns 'raw data' text which can be pasted into keyboard-layout-editor.

    To make valid JSON out of it, wrap it in brackets.
    """
    rows = to_kle_rows(layout, homing_nub_type)
    return ",\n".join(json.dumps(row, indent=None) for row in rows)


def to_via(
    layout: NormalizedLayout, homing_nub_type: HomingNubType = HomingNubType.SCOOP
) -> Dict[str, Any]:
    """Returns VIA/Vial keyboard definition of the layout.

    Matrix size is taken from 'row,col' labels. Layout options come from
    metadata, or are generated from 'option,choice' labels when not defined.
    """
    max_row = max_col = 0
    choices: Dict[int, Set[int]] = defaultdict(set)
    for key in layout.keys:
        if position := get_matrix_position(key):
            max_row = max(max_row, position[0])
            max_col = max(max_col, position[1])
        if option := get_layout_option(key):
            choices[option[0]].add(option[1])

    metadata = layout.metadata
    labels: List[Union[str, List[str]]] = []
    if metadata.layoutOptions:
        for layout_option in metadata.layoutOptions:
            if layout_option.values:
                labels.append([layout_option.name, *layout_option.values])
            else:
                labels.append(layout_option.name)
    else:
        for index in sorted(choices):
            values = [f"Value {v}" for v in sorted(choices[index])]
            labels.append([f"Option {index}", *values])

    keymap = to_kle_rows(NormalizedLayout(keys=layout.keys), homing_nub_type)
    return {
        "name": metadata.name or "Untitled Keyboard",
        "vendorId": metadata.vendorId or "0x0000",
        "productId": metadata.productId or "0x0000",
        "lighting": metadata.lighting or "none",
        "matrix": {"rows": max_row + 1, "cols": max_col + 1},
        "layouts": {"labels": labels, "keymap": keymap},
    }
