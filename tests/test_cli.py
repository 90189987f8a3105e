# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

import io
import json
import logging

import pytest
from conftest import ExitTest

from kblayout.__main__ import app
from kblayout.share import SHARE_URL

logger = logging.getLogger(__name__)


def test_normalized_output(cli_isolation, data_dir, tmpdir) -> None:
    output = f"{tmpdir}/result.json"
    args = ["-i", str(data_dir / "iso-enter.json"), "-o", output]
    with cli_isolation(args):
        app()

    with open(output, "r", encoding="utf-8") as f:
        result = json.load(f)
    assert result["metadata"]["name"] == "ISO enter"
    assert result["metadata"]["switchMount"] == "cherry"
    assert [key["labels"] for key in result["keys"]] == [
        ["Tab"],
        ["Q"],
        ["Enter"],
        ["Caps Lock"],
        ["A"],
        ["F", "", "", "", ""],
    ]
    assert result["keys"][-1]["frontLegends"] == ["", "Bar", ""]


def test_kle_raw_output(cli_isolation, data_dir, tmpdir, capsys) -> None:
    output = f"{tmpdir}/result.json"
    args = [
        "-i",
        str(data_dir / "raw-data-rotated.txt"),
        "-o",
        output,
        "--outform",
        "KLE_RAW",
        "--text",
    ]
    with cli_isolation(args):
        app()

    with open(output, "r", encoding="utf-8") as f:
        result = json.load(f)
    assert result == [
        {"name": "Rotated cluster", "author": "kblayout"},
        ["Esc", {"x": 1}, "F1", "F2"],
        [{"rx": 5, "ry": 1, "r": 15}, "A", "B"],
        ["C", "D"],
        [{"r": 0}, "E"],
    ]
    captured = capsys.readouterr()
    assert captured.out.startswith('{"name": "Rotated cluster"')


def test_stdin_input(cli_isolation, monkeypatch, tmpdir) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO('[[{w:2},"Space"]]'))
    output = f"{tmpdir}/result.json"
    with cli_isolation(["-i", "-", "-o", output]):
        app()

    with open(output, "r", encoding="utf-8") as f:
        result = json.load(f)
    assert len(result["keys"]) == 1
    assert result["keys"][0]["width"] == 2
    assert result["keys"][0]["labels"] == ["Space"]


@pytest.mark.parametrize(
    "homing_nub,expected", [("scoop", ["", "Scoop", ""]), ("BAR", ["", "Bar", ""])]
)
def test_homing_nub_option(
    cli_isolation, monkeypatch, tmpdir, homing_nub, expected
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO('[[{n:true},"F"]]'))
    output = f"{tmpdir}/result.json"
    with cli_isolation(["-i", "-", "-o", output, "--homing-nub", homing_nub]):
        app()

    with open(output, "r", encoding="utf-8") as f:
        result = json.load(f)
    assert result["keys"][0]["frontLegends"] == expected


def test_invalid_homing_nub_option(cli_isolation, data_dir) -> None:
    args = ["-i", str(data_dir / "iso-enter.json"), "--homing-nub", "dot"]
    with cli_isolation(args):
        with pytest.raises(ExitTest) as e:
            app()
    assert e.value.args[0] == 2


def test_missing_input_file(cli_isolation, tmpdir, caplog) -> None:
    missing = f"{tmpdir}/missing.json"
    with cli_isolation(["-i", missing]):
        with pytest.raises(ExitTest) as e:
            app()
    assert e.value.args[0] == 1
    assert caplog.records[-1].message == f"File {missing} does not exist, aborting"


def test_invalid_input_file(cli_isolation, tmpdir, caplog) -> None:
    invalid = f"{tmpdir}/invalid.json"
    with open(invalid, "w", encoding="utf-8") as f:
        f.write('["A", ')
    output = f"{tmpdir}/result.json"
    with cli_isolation(["-i", invalid, "-o", output]):
        with pytest.raises(ExitTest) as e:
            app()
    assert e.value.args[0] == 1
    assert any(record.levelname == "ERROR" for record in caplog.records)
    assert not (tmpdir / "result.json").exists()


def test_share_url(cli_isolation, data_dir, capsys) -> None:
    with cli_isolation(["-i", str(data_dir / "spacebar.yaml"), "--url"]):
        app()

    captured = capsys.readouterr()
    assert captured.out.startswith(SHARE_URL)


def test_legacy_share_url(cli_isolation, data_dir, capsys) -> None:
    with cli_isolation(["-i", str(data_dir / "spacebar.yaml"), "--legacy-url"]):
        app()

    captured = capsys.readouterr()
    assert captured.out.startswith("http://www.keyboard-layout-editor.com/##")


def test_via_output(cli_isolation, data_dir, tmpdir) -> None:
    output = f"{tmpdir}/result.json"
    args = ["-i", str(data_dir / "via.json"), "-o", output, "--outform", "VIA"]
    with cli_isolation(args):
        app()

    with open(output, "r", encoding="utf-8") as f:
        result = json.load(f)
    with open(data_dir / "via.json", "r", encoding="utf-8") as f:
        expected = json.load(f)
    assert result == expected
