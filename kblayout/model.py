# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple, Type

from .defaults import DEFAULT_KEY_COLOR, DEFAULT_PROFILE


def generate_key_id() -> str:
    return f"key_{uuid.uuid4().hex}"


def _round(value: Any) -> Any:
    if isinstance(value, float):
        return round(value, 6)
    return value


@dataclass
class KeyDefault:
    textColor: Optional[str] = None  # noqa: N815
    textSize: Optional[float] = None  # noqa: N815

    def __post_init__(self: KeyDefault) -> None:
        self.textSize = _round(self.textSize)


@dataclass
class Key:
    x: float = 0
    y: float = 0
    width: float = 1
    height: float = 1
    labels: List[str] = field(default_factory=list)
    color: str = DEFAULT_KEY_COLOR
    profile: str = DEFAULT_PROFILE
    # secondary rectangle of stepped and ISO Enter like keys
    x2: Optional[float] = None
    y2: Optional[float] = None
    width2: Optional[float] = None
    height2: Optional[float] = None
    rotation_x: Optional[float] = None
    rotation_y: Optional[float] = None
    rotation_angle: Optional[float] = None
    textColor: Optional[List[Optional[str]]] = None  # noqa: N815
    textSize: Optional[List[Optional[float]]] = None  # noqa: N815
    default: Optional[KeyDefault] = None
    nub: bool = False
    ghost: bool = False
    stepped: bool = False
    decal: bool = False
    align: Optional[int] = None
    frontLegends: Optional[List[str]] = None  # noqa: N815
    centerLegend: Optional[str] = None  # noqa: N815
    id: str = field(default_factory=generate_key_id, compare=False)

    def __post_init__(self: Key) -> None:
        if isinstance(self.default, dict):
            self.default = KeyDefault(**self.default)
        for key_field in self.__dataclass_fields__:
            value = getattr(self, key_field)
            if isinstance(value, float):
                setattr(self, key_field, round(value, 6))

    def get_label(self: Key, index: int) -> Optional[str]:
        if len(self.labels) > index:
            return self.labels[index]
        return None


@dataclass(frozen=True)
class Background:
    name: Optional[str] = None
    style: Optional[str] = None


@dataclass(frozen=True)
class LayoutOption:
    """VIA layout option, on/off option when `values` is empty"""

    name: str
    values: Tuple[str, ...] = ()

    def __post_init__(self: LayoutOption) -> None:
        object.__setattr__(self, "values", tuple(self.values))


# VIA definition fields, not part of keyboard-layout-editor metadata
VIA_METADATA_FIELDS = ("vendorId", "productId", "lighting", "layoutOptions")


@dataclass(frozen=True)
class LayoutMetadata:
    name: Optional[str] = None
    author: Optional[str] = None
    notes: Optional[str] = None
    background: Optional[Background] = None
    radii: Optional[str] = None
    switchMount: Optional[str] = None  # noqa: N815
    switchBrand: Optional[str] = None  # noqa: N815
    switchType: Optional[str] = None  # noqa: N815
    plate: Optional[bool] = None
    pcb: Optional[bool] = None
    css: Optional[str] = None
    backcolor: Optional[str] = None
    vendorId: Optional[str] = None  # noqa: N815
    productId: Optional[str] = None  # noqa: N815
    lighting: Optional[str] = None
    layoutOptions: Optional[Tuple[LayoutOption, ...]] = None  # noqa: N815

    def __post_init__(self: LayoutMetadata) -> None:
        if isinstance(self.background, dict):
            field_set = {f.name for f in fields(Background)}
            background = {k: v for k, v in self.background.items() if k in field_set}
            # frozen dataclass, bypass generated __setattr__
            object.__setattr__(self, "background", Background(**background))
        if self.layoutOptions is not None:
            options = tuple(
                o if isinstance(o, LayoutOption) else LayoutOption(**o)
                for o in self.layoutOptions
            )
            object.__setattr__(self, "layoutOptions", options or None)

    @classmethod
    def from_dict(cls: Type[LayoutMetadata], data: Dict[str, Any]) -> LayoutMetadata:
        field_set = {f.name for f in fields(cls) if f.init}
        return cls(**{k: v for k, v in data.items() if k in field_set})

    def to_dict(self: LayoutMetadata) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for k, v in asdict(self).items():
            if k in VIA_METADATA_FIELDS:
                continue
            if isinstance(v, dict):
                v = {name: value for name, value in v.items() if value is not None}
            if v is not None:
                result[k] = v
        return result


@dataclass
class NormalizedLayout:
    metadata: LayoutMetadata = field(default_factory=LayoutMetadata)
    keys: List[Key] = field(default_factory=list)

    @classmethod
    def from_json(cls: Type[NormalizedLayout], data: dict) -> NormalizedLayout:
        if not isinstance(data, dict):
            msg = f"Expected an object, got '{type(data).__name__}'"
            raise TypeError(msg)
        metadata = data.get("metadata") or {}
        if isinstance(metadata, dict):
            metadata = LayoutMetadata.from_dict(metadata)
        keys: List[Key] = [Key(**key) for key in data["keys"]]
        return cls(metadata=metadata, keys=keys)

    def to_dict(self: NormalizedLayout) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self: NormalizedLayout, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)
