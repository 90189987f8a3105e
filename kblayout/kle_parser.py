# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .defaults import (
    DEFAULT_KEY_COLOR,
    DEFAULT_PROFILE,
    KEY_MAX_LABELS,
    VIA_LAYOUT_OPTION_LABEL,
    VIA_MATRIX_POSITION_LABEL,
)
from .errors import FormatError, FormatErrorReason
from .icons import apply_icon_text_sizes
from .legends import apply_homing_nub, classify
from .model import Key, KeyDefault, LayoutMetadata, LayoutOption, NormalizedLayout
from .options import ParseOptions
from .raw_document import RawLayoutDocument, parse_raw_document

logger = logging.getLogger(__name__)

ROTATION_PROPERTIES = ("rx", "ry", "r")
NUMERIC_PROPERTIES = ("x", "y", "w", "h", "x2", "y2", "w2", "h2", "rx", "ry", "r")
FLAG_PROPERTIES = {"n": "nub", "l": "stepped", "d": "decal", "g": "ghost"}
KNOWN_PROPERTIES = set(NUMERIC_PROPERTIES) | set(FLAG_PROPERTIES) | {
    "a",
    "c",
    "t",
    "p",
    "f",
    "f2",
    "fa",
    # switch metadata, not part of normalized key
    "sm",
    "sb",
    "st",
}

# 'row,col' and 'option,choice' labels of VIA keymaps
INDEX_PAIR_RE = re.compile(r"^\s*(\d+)\s*,\s*(\d+)\s*$")


def _is_number(value: Any) -> bool:
    # NaN and Infinity are valid for json.loads but not for a layout
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _trim(values: List[Any]) -> Optional[List[Any]]:
    result = list(values)
    while result and result[-1] in (None, ""):
        result.pop()
    return result or None


@dataclass
class ParseCursor:
    """Running interpretation state of a single parse call"""

    x: float = 0
    y: float = 0
    # y at which current row began
    row_y: float = 0
    width: float = 1
    height: float = 1
    x2: float = 0
    y2: float = 0
    width2: float = 0
    height2: float = 0
    rotation_x: float = 0
    rotation_y: float = 0
    rotation_angle: float = 0
    # rotation origin x which rows reset to, cleared by zero angle
    cluster_x: Optional[float] = None
    color: str = DEFAULT_KEY_COLOR
    profile: str = DEFAULT_PROFILE
    default_text_color: Optional[str] = None
    default_text_size: Optional[float] = None
    text_color: List[Optional[str]] = field(default_factory=list)
    text_size: List[Optional[float]] = field(default_factory=list)
    ghost: bool = False
    nub: bool = False
    stepped: bool = False
    decal: bool = False
    align: Optional[int] = None
    first_row: bool = True

    def start_row(self: ParseCursor) -> None:
        if self.first_row:
            self.first_row = False
        else:
            self.row_y = round(self.row_y + 1, 6)
        self.x = self.cluster_x if self.cluster_x is not None else 0
        self.y = self.row_y

    def _number(self: ParseCursor, props: Dict[str, Any], name: str) -> Optional[float]:
        if name not in props:
            return None
        value = props[name]
        if not _is_number(value):
            logger.warning(f"Ignoring non-numeric '{name}' property: {value!r}")
            return None
        return value

    def _string(self: ParseCursor, props: Dict[str, Any], name: str) -> Optional[str]:
        if name not in props:
            return None
        value = props[name]
        if not isinstance(value, str):
            logger.warning(f"Ignoring invalid '{name}' property: {value!r}")
            return None
        return value

    def _size(self: ParseCursor, props: Dict[str, Any], name: str) -> Optional[float]:
        value = self._number(props, name)
        if value is not None and value <= 0:
            logger.warning(f"Ignoring non-positive '{name}' property: {value!r}")
            return None
        return value

    def _apply_rotation(self: ParseCursor, props: Dict[str, Any]) -> None:
        rx = self._number(props, "rx")
        ry = self._number(props, "ry")
        if rx is not None:
            self.rotation_x = rx
            self.cluster_x = rx
        if ry is not None:
            self.rotation_y = ry
        if rx is not None or ry is not None:
            # re-anchor to rotation origin
            self.x = self.rotation_x
            self.y = self.row_y = self.rotation_y

        r = self._number(props, "r")
        if r is not None:
            self.rotation_angle = r
            if r == 0:
                self.cluster_x = None

    def _apply_text_color(self: ParseCursor, value: Any) -> None:
        if isinstance(value, str):
            if "\n" not in value:
                self.default_text_color = value or None
                self.text_color = []
                return
            items = value.split("\n")
            if items[0]:
                self.default_text_color = items[0]
            self.text_color = [None] + [item or None for item in items[1:]]
        elif isinstance(value, list):
            self.text_color = [
                item if isinstance(item, str) and item else None for item in value
            ]
        else:
            logger.warning(f"Ignoring invalid 't' property: {value!r}")

    def _apply_text_size(self: ParseCursor, props: Dict[str, Any]) -> None:
        if "f" in props:
            value = props["f"]
            if _is_number(value):
                self.default_text_size = value or None
                self.text_size = []
            elif isinstance(value, list):
                self.text_size = [v if _is_number(v) and v else None for v in value]
            else:
                logger.warning(f"Ignoring invalid 'f' property: {value!r}")
        if "f2" in props:
            value = props["f2"]
            if _is_number(value):
                first = self.text_size[0] if self.text_size else None
                self.text_size = [first] + (KEY_MAX_LABELS - 1) * [value]
            elif isinstance(value, list):
                self.text_size = [v if _is_number(v) and v else None for v in value]
            else:
                logger.warning(f"Ignoring invalid 'f2' property: {value!r}")
        if "fa" in props:
            value = props["fa"]
            if isinstance(value, list):
                self.text_size = [v if _is_number(v) and v else None for v in value]
            else:
                logger.warning(f"Ignoring invalid 'fa' property: {value!r}")

    def apply(self: ParseCursor, props: Dict[str, Any], first_in_row: bool) -> None:
        if not first_in_row and any(p in props for p in ROTATION_PROPERTIES):
            logger.warning(
                "Rotation can only be specified on the first key in the row, "
                f"applying anyway: {props}"
            )

        # rotation origin first, offsets in the same object apply after re-anchoring
        self._apply_rotation(props)

        if "a" in props:
            if _is_number(props["a"]):
                self.align = int(props["a"])
            else:
                logger.warning(f"Ignoring invalid 'a' property: {props['a']!r}")
        self._apply_text_size(props)
        if (profile := self._string(props, "p")) is not None:
            self.profile = profile
        if (color := self._string(props, "c")) is not None:
            self.color = color
        if "t" in props:
            self._apply_text_color(props["t"])

        if (dx := self._number(props, "x")) is not None:
            self.x = round(self.x + dx, 6)
        if (dy := self._number(props, "y")) is not None:
            self.y = round(self.y + dy, 6)
            self.row_y = self.y

        if (w := self._size(props, "w")) is not None:
            self.width = w
        if (h := self._size(props, "h")) is not None:
            self.height = h
        for name, attribute in (
            ("x2", "x2"),
            ("y2", "y2"),
            ("w2", "width2"),
            ("h2", "height2"),
        ):
            if (value := self._number(props, name)) is not None:
                setattr(self, attribute, value)

        for name, attribute in FLAG_PROPERTIES.items():
            if name in props:
                setattr(self, attribute, bool(props[name]))

        unknown = set(props) - KNOWN_PROPERTIES
        if unknown:
            logger.debug(f"Ignoring unknown properties: {sorted(unknown)}")

    def emit(self: ParseCursor, label: str, options: ParseOptions) -> Key:
        slots = label.split("\n")
        if len(slots) > KEY_MAX_LABELS:
            msg = (
                f"Illegal key labels: '{repr(label)}'. "
                f"Labels string can contain {KEY_MAX_LABELS} '\\n' "
                "separated items, ignoring redundant values."
            )
            logger.warning(msg)
            slots = slots[0:KEY_MAX_LABELS]

        text_size = apply_icon_text_sizes(slots, self.text_size)

        classification = classify(slots, self.width, self.decal)
        if self.nub:
            classification = apply_homing_nub(
                classification, options.homing_nub_type
            )

        key = Key(
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            labels=classification.labels,
            color=self.color,
            profile=self.profile,
            textColor=_trim(self.text_color),
            textSize=_trim(text_size),
            nub=self.nub,
            ghost=self.ghost,
            stepped=self.stepped,
            decal=self.decal,
            align=self.align,
            frontLegends=classification.front_legends,
            centerLegend=classification.center_legend,
        )
        if self.x2:
            key.x2 = self.x2
        if self.y2:
            key.y2 = self.y2
        if self.width2:
            key.width2 = self.width2
        if self.height2:
            key.height2 = self.height2
        if self.rotation_angle:
            key.rotation_x = self.rotation_x
            key.rotation_y = self.rotation_y
            key.rotation_angle = self.rotation_angle
        if self.default_text_color or self.default_text_size:
            key.default = KeyDefault(
                textColor=self.default_text_color,
                textSize=self.default_text_size,
            )
        return key

    def next_key(self: ParseCursor) -> None:
        self.x = round(self.x + self.width, 6)
        self.width = 1
        self.height = 1
        self.x2 = 0
        self.y2 = 0
        self.width2 = 0
        self.height2 = 0
        self.ghost = False
        self.nub = False
        self.stepped = False
        self.decal = False
        self.text_color = []
        self.text_size = []
        self.align = None


def _split_document(doc: Any) -> Tuple[LayoutMetadata, List[Any]]:
    if isinstance(doc, list):
        if doc and isinstance(doc[0], dict):
            return LayoutMetadata.from_dict(doc[0]), doc[1:]
        return LayoutMetadata(), doc

    if isinstance(doc, dict):
        rows = doc.get("keyboardData")
        if not isinstance(rows, list):
            rows = next((v for v in doc.values() if isinstance(v, list)), None)
        if rows is None:
            msg = "Invalid layout format: no keyboard data array found"
            raise FormatError(msg, FormatErrorReason.STRUCTURE)
        return LayoutMetadata.from_dict(doc), rows

    msg = f"Invalid layout format: expected array or object, got '{type(doc).__name__}'"
    raise FormatError(msg, FormatErrorReason.NOT_ARRAY_OR_OBJECT)


def interpret_document(
    doc: RawLayoutDocument, options: Optional[ParseOptions] = None
) -> NormalizedLayout:
    """Converts raw row based document into normalized layout.

    Rows are walked in order, property objects mutate the cursor
    and each label string emits one key. Malformed items are skipped,
    only document which is not an array/object of rows fails.
    """
    if is_via_definition(doc):
        return from_via(doc, options)

    options = options or ParseOptions()
    metadata, rows = _split_document(doc)

    cursor = ParseCursor()
    keys: List[Key] = []

    for r, row in enumerate(rows):
        if not isinstance(row, list):
            logger.warning(f"Skipping row {r}, expected an array, got: {row!r}")
            continue

        cursor.start_row()
        first_in_row = True
        for item in row:
            if isinstance(item, dict):
                cursor.apply(item, first_in_row)
            elif isinstance(item, str):
                keys.append(cursor.emit(item, options))
                cursor.next_key()
                first_in_row = False
            else:
                logger.warning(f"Skipping unexpected item in row {r}: {item!r}")

    logger.info(f"Parsed {len(keys)} keys")
    return NormalizedLayout(metadata=metadata, keys=keys)


def _index_pair(key: Key, slot: int) -> Optional[Tuple[int, int]]:
    label = key.get_label(slot)
    match = INDEX_PAIR_RE.match(label) if label else None
    if match:
        return int(match.group(1)), int(match.group(2))
    return None


def get_matrix_position(key: Key) -> Optional[Tuple[int, int]]:
    return _index_pair(key, VIA_MATRIX_POSITION_LABEL)


def get_layout_option(key: Key) -> Optional[Tuple[int, int]]:
    return _index_pair(key, VIA_LAYOUT_OPTION_LABEL)


def is_via_definition(doc: Any) -> bool:
    if not isinstance(doc, dict):
        return False
    layouts = doc.get("layouts")
    return isinstance(layouts, dict) and isinstance(layouts.get("keymap"), list)


def _layout_options(labels: Any) -> Optional[Tuple[LayoutOption, ...]]:
    if not isinstance(labels, list):
        return None
    options: List[LayoutOption] = []
    for item in labels:
        if isinstance(item, str):
            options.append(LayoutOption(item))
        elif isinstance(item, list) and item and all(isinstance(v, str) for v in item):
            options.append(LayoutOption(item[0] or "Option", item[1:] or ["Default"]))
        else:
            logger.warning(f"Skipping invalid layout option: {item!r}")
    return tuple(options) or None


def _check_matrix(matrix: Any, keys: List[Key]) -> None:
    rows = matrix.get("rows") if isinstance(matrix, dict) else None
    cols = matrix.get("cols") if isinstance(matrix, dict) else None
    if not (_is_number(rows) and _is_number(cols)):
        logger.warning(f"Ignoring invalid VIA matrix size: {matrix!r}")
        return
    for key in keys:
        if key.decal:
            continue
        position = get_matrix_position(key)
        if position is None:
            logger.warning(f"Key at ({key.x}, {key.y}) has no matrix position label")
        elif position[0] >= rows or position[1] >= cols:
            logger.warning(
                f"Key matrix position {position[0]},{position[1]} "
                f"outside of {rows}x{cols} matrix"
            )


def from_via(
    doc: Dict[str, Any], options: Optional[ParseOptions] = None
) -> NormalizedLayout:
    """Converts VIA/Vial keyboard definition into normalized layout.

    Keymap rows use keyboard-layout-editor syntax, keys keep 'row,col'
    matrix position in label 0 and 'option,choice' in label 3.
    """
    if not is_via_definition(doc):
        msg = "Invalid VIA definition: required 'layouts.keymap' array not found"
        raise FormatError(msg, FormatErrorReason.STRUCTURE)

    logger.info("Reading VIA layout definition")
    layout = interpret_document(doc["layouts"]["keymap"], options)
    if "matrix" in doc:
        _check_matrix(doc["matrix"], layout.keys)

    def _str(name: str) -> Optional[str]:
        value = doc.get(name)
        return value if isinstance(value, str) else None

    metadata = LayoutMetadata(
        name=_str("name"),
        vendorId=_str("vendorId"),
        productId=_str("productId"),
        lighting=_str("lighting"),
        layoutOptions=_layout_options(doc["layouts"].get("labels")),
    )
    return NormalizedLayout(metadata=metadata, keys=layout.keys)


def parse_layout(text: str, options: Optional[ParseOptions] = None) -> NormalizedLayout:
    return interpret_document(parse_raw_document(text), options)


def parse_layout_file(
    layout_path: Union[str, os.PathLike], options: Optional[ParseOptions] = None
) -> NormalizedLayout:
    # Layout downloaded from keyboard-layout-editor is most likely using utf-8.
    # Use it explicitly in case the platform locale sets different encoding.
    with open(layout_path, "r", encoding="utf-8") as f:
        text = f.read()
    logger.info(f"Loading layout from '{layout_path}'")

    if str(layout_path).endswith((".yaml", ".yml")):
        try:
            layout = yaml.safe_load(text)
        except yaml.YAMLError as e:
            msg = f"Invalid layout format: could not load yaml file ({e})"
            raise FormatError(msg, FormatErrorReason.SYNTAX) from e
        return interpret_document(layout, options)

    return parse_layout(text, options)

