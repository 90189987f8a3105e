# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

import json

import pytest

from kblayout.model import (
    Background,
    Key,
    KeyDefault,
    LayoutMetadata,
    LayoutOption,
    NormalizedLayout,
)
from kblayout.options import HomingNubType, ParseOptions


def test_key_rounding() -> None:
    key = Key(x=0.1 + 0.2, width=1.0000001, default={"textSize": 3.00000001})
    assert key.x == 0.3
    assert key.width == 1.0
    assert key.default == KeyDefault(textSize=3.0)


def test_key_id_not_compared() -> None:
    assert Key(labels=["A"]) == Key(labels=["A"])
    assert Key(labels=["A"]).id != Key(labels=["A"]).id


def test_get_label() -> None:
    assert Key(labels=["A", "B"]).get_label(1) == "B"
    assert Key(labels=["A"]).get_label(5) is None


def test_metadata_from_dict() -> None:
    metadata = LayoutMetadata.from_dict(
        {"name": "kb", "plate": True, "background": {"name": "Oak", "x": 1}, "y": 2}
    )
    assert metadata == LayoutMetadata(
        name="kb", plate=True, background=Background(name="Oak")
    )
    assert metadata.to_dict() == {
        "name": "kb",
        "plate": True,
        "background": {"name": "Oak"},
    }


def test_metadata_is_immutable() -> None:
    metadata = LayoutMetadata(name="kb")
    with pytest.raises(AttributeError):
        metadata.name = "other"


def test_layout_json_round_trip() -> None:
    layout = NormalizedLayout(
        metadata=LayoutMetadata(name="kb", background=Background("Oak", "color: red")),
        keys=[
            Key(labels=["A"], frontLegends=["", "Scoop", ""], nub=True),
            Key(
                x=1,
                width=1.25,
                height=2,
                x2=-0.25,
                width2=1.5,
                height2=1,
                rotation_x=1,
                rotation_y=0,
                rotation_angle=15,
                textSize=[None, 9],
                default=KeyDefault(textColor="#ff0000"),
            ),
        ],
    )
    data = json.loads(layout.to_json(indent=2))
    assert data["keys"][1]["default"] == {"textColor": "#ff0000", "textSize": None}
    result = NormalizedLayout.from_json(data)
    assert result == layout
    assert result.keys[0].id == layout.keys[0].id


def test_from_json_invalid() -> None:
    with pytest.raises(TypeError):
        NormalizedLayout.from_json([])
    with pytest.raises(KeyError):
        NormalizedLayout.from_json({"metadata": {}})


def test_from_json_without_metadata() -> None:
    layout = NormalizedLayout.from_json({"keys": [{"labels": ["A"]}]})
    assert layout == NormalizedLayout(keys=[Key(labels=["A"])])


@pytest.mark.parametrize(
    # fmt: off
    "name,expected",
    [
        ("scoop",             HomingNubType.SCOOP),
        ("Bar",               HomingNubType.BAR),
        ("NONE",              HomingNubType.NONE),
        (HomingNubType.BAR,   HomingNubType.BAR),
    ],
    # fmt: on
)
def test_homing_nub_type(name, expected) -> None:
    assert HomingNubType.get(name) == expected
    assert ParseOptions(homing_nub_type=name).homing_nub_type == expected


@pytest.mark.parametrize("name", ["dot", "", None, 1])
def test_invalid_homing_nub_type(name) -> None:
    with pytest.raises(ValueError, match=f"'{name}' is not a valid HomingNubType"):
        HomingNubType.get(name)


def test_homing_nub_legend() -> None:
    assert [t.legend for t in HomingNubType] == ["Scoop", "Bar", ""]


def test_metadata_layout_options() -> None:
    metadata = LayoutMetadata.from_dict(
        {
            "name": "kb",
            "vendorId": "0x1234",
            "layoutOptions": [
                {"name": "Split space"},
                {"name": "Enter", "values": ["ANSI", "ISO"]},
            ],
        }
    )
    assert metadata.layoutOptions == (
        LayoutOption("Split space"),
        LayoutOption("Enter", ("ANSI", "ISO")),
    )
    # VIA only fields are not written to keyboard-layout-editor metadata
    assert metadata.to_dict() == {"name": "kb"}

    layout = NormalizedLayout(metadata=metadata, keys=[Key(labels=["0,0"])])
    assert NormalizedLayout.from_json(json.loads(layout.to_json())) == layout


def test_metadata_empty_layout_options() -> None:
    assert LayoutMetadata(layoutOptions=[]).layoutOptions is None
