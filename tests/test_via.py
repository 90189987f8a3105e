# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import unittest

import pytest

from kblayout.errors import FormatError, FormatErrorReason
from kblayout.kle_export import to_via
from kblayout.kle_parser import (
    from_via,
    get_layout_option,
    get_matrix_position,
    interpret_document,
    is_via_definition,
    parse_layout_file,
)
from kblayout.model import Key, LayoutMetadata, LayoutOption, NormalizedLayout

from conftest import positions


def test_from_via(data_dir) -> None:
    layout = parse_layout_file(data_dir / "via.json")
    assert layout.metadata == LayoutMetadata(
        name="Tiny macropad",
        vendorId="0x1234",
        productId="0x0001",
        lighting="none",
        layoutOptions=(
            LayoutOption("Split bottom row"),
            LayoutOption("Top right", ("1u", "2u")),
        ),
    )
    assert positions(layout) == [
        (0, 0), (1, 0), (2, 0), (3.5, 0), (0, 1), (2, 1), (3.5, 1), (4.5, 1)
    ]
    assert [get_layout_option(k) for k in layout.keys] == [
        None, None, (1, 0), (1, 1), (0, 0), None, (0, 1), (0, 1)
    ]


def test_via_round_trip(data_dir) -> None:
    with open(data_dir / "via.json", "r", encoding="utf-8") as f:
        definition = json.load(f)
    layout = from_via(definition)
    assert to_via(layout) == definition
    assert from_via(to_via(layout)) == layout


@pytest.mark.parametrize(
    # fmt: off
    "label,expected",
    [
        ("0,0",      (0, 0)),
        (" 3, 12 ",  (3, 12)),
        ("A",        None),
        ("1,2,3",    None),
        ("",         None),
    ],
    # fmt: on
)
def test_get_matrix_position(label, expected) -> None:
    assert get_matrix_position(Key(labels=[label])) == expected


def test_get_matrix_position_without_labels() -> None:
    assert get_matrix_position(Key()) is None
    assert get_layout_option(Key(labels=["0,0"])) is None


@pytest.mark.parametrize(
    # fmt: off
    "doc,expected",
    [
        ({"layouts": {"keymap": []}},    True),
        ({"layouts": {"keymap": {}}},    False),
        ({"layouts": []},                False),
        ({"keyboardData": [["A"]]},      False),
        ([["A"]],                        False),
    ],
    # fmt: on
)
def test_is_via_definition(doc, expected) -> None:
    assert is_via_definition(doc) == expected


def test_from_via_invalid() -> None:
    with pytest.raises(FormatError) as e:
        from_via({"name": "kb", "layouts": {}})
    assert e.value.reason == FormatErrorReason.STRUCTURE


def test_to_via_generated_layout_options() -> None:
    layout = interpret_document(
        [["0,0\n\n\n0,0", "0,0\n\n\n0,1", "0,1\n\n\n1,0", "1,3"]]
    )
    assert to_via(layout) == {
        "name": "Untitled Keyboard",
        "vendorId": "0x0000",
        "productId": "0x0000",
        "lighting": "none",
        "matrix": {"rows": 2, "cols": 4},
        "layouts": {
            "labels": [["Option 0", "Value 0", "Value 1"], ["Option 1", "Value 0"]],
            "keymap": [
                ["0,0\n\n\n0,0", "0,0\n\n\n0,1", "0,1\n\n\n1,0", "1,3"],
            ],
        },
    }


def test_to_via_empty_layout() -> None:
    result = to_via(NormalizedLayout())
    assert result["matrix"] == {"rows": 1, "cols": 1}
    assert result["layouts"] == {"labels": [], "keymap": []}


def test_via_single_item_layout_option() -> None:
    layout = from_via({"layouts": {"labels": [["Enter"]], "keymap": [["0,0"]]}})
    assert layout.metadata.layoutOptions == (LayoutOption("Enter", ("Default",)),)
    assert to_via(layout)["layouts"]["labels"] == [["Enter", "Default"]]


class ViaWarningsTestCase(unittest.TestCase):
    def test_matrix_mismatch(self) -> None:
        doc = {
            "matrix": {"rows": 1, "cols": 2},
            "layouts": {"keymap": [["0,0", "0,2", "A", {"d": True}, "LED"]]},
        }
        with self.assertLogs("kblayout.kle_parser", level="WARNING") as cm:
            layout = from_via(doc)
        assert len(layout.keys) == 4
        self.assertEqual(
            cm.output,
            [
                "WARNING:kblayout.kle_parser:Key matrix position 0,2 "
                "outside of 1x2 matrix",
                "WARNING:kblayout.kle_parser:Key at (2, 0) has no matrix "
                "position label",
            ],
        )

    def test_invalid_matrix_and_layout_options(self) -> None:
        doc = {
            "matrix": {"rows": "two"},
            "layouts": {"labels": ["Split", 5, []], "keymap": [["0,0"]]},
        }
        with self.assertLogs("kblayout.kle_parser", level="WARNING") as cm:
            layout = from_via(doc)
        assert layout.metadata.layoutOptions == (LayoutOption("Split"),)
        self.assertEqual(
            cm.output,
            [
                "WARNING:kblayout.kle_parser:Ignoring invalid VIA matrix size: "
                "{'rows': 'two'}",
                "WARNING:kblayout.kle_parser:Skipping invalid layout option: 5",
                "WARNING:kblayout.kle_parser:Skipping invalid layout option: []",
            ],
        )
