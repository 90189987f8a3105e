# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

import argparse
import json
import logging
import pprint
import sys

from . import __version__
from .errors import FormatError
from .kle_export import to_kle, to_via
from .kle_parser import parse_layout, parse_layout_file
from .model import NormalizedLayout
from .options import HomingNubType, ParseOptions
from .share import layout_to_url

logger = logging.getLogger(__name__)


def load_layout(input_path: str, options: ParseOptions) -> NormalizedLayout:
    if input_path == "-":
        logger.info("Reading layout from stdin")
        return parse_layout(sys.stdin.read(), options)
    return parse_layout_file(input_path, options)


def app() -> None:
    parser = argparse.ArgumentParser(
        description="Legacy keyboard-layout-editor layout importer",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-i",
        "--in",
        required=True,
        help="Layout file (json, yaml or 'raw data' text) or '-' for stdin",
    )
    parser.add_argument("-o", "--out", required=False, help="Result file")
    parser.add_argument(
        "--outform",
        required=False,
        default="NORMALIZED",
        choices=["NORMALIZED", "KLE_RAW", "VIA"],
        help="Specifies the output format, default=%(default)s",
    )
    parser.add_argument(
        "--homing-nub",
        required=False,
        default=HomingNubType.SCOOP,
        type=HomingNubType.get,
        choices=list(HomingNubType),
        help=(
            "Front legend of homing keys without SCOOP/BAR marker,\n"
            "default=%(default)s"
        ),
    )
    parser.add_argument(
        "--text", required=False, action="store_true", help="Print result"
    )
    parser.add_argument(
        "--url",
        required=False,
        action="store_true",
        help="Print keyboard-tools.xyz editor share link",
    )
    parser.add_argument(
        "--legacy-url",
        required=False,
        action="store_true",
        help="Print share link for old keyboard-layout-editor",
    )
    parser.add_argument(
        "--log-level",
        required=False,
        default="WARNING",
        choices=logging._nameToLevel.keys(),
        type=str,
        help="Provide logging level, default=%(default)s",
    )

    args = parser.parse_args()
    input_path = getattr(args, "in")
    output_path = args.out

    # set up logger
    logging.basicConfig(
        level=args.log_level, format="%(asctime)s: %(message)s", datefmt="%H:%M:%S"
    )

    options = ParseOptions(homing_nub_type=args.homing_nub)
    try:
        layout = load_layout(input_path, options)
    except FileNotFoundError:
        logger.error(f"File {input_path} does not exist, aborting")
        sys.exit(1)
    except FormatError:
        # already logged
        sys.exit(1)

    if args.outform == "NORMALIZED":
        result = layout.to_dict()
        if args.text:
            pprint.pprint(result)
    elif args.outform == "VIA":
        result = to_via(layout, options.homing_nub_type)
        if args.text:
            pprint.pprint(result)
    else:  # KLE_RAW
        kle = to_kle(layout, options.homing_nub_type)
        if args.text:
            print(kle)
        # 'to_kle' returns 'raw data' string which can be copy pasted
        # to keyboard-layout-editor, to make json out of it we need
        # to wrap it in list
        result = json.loads("[" + kle + "]")

    if args.url or args.legacy_url:
        print(layout_to_url(layout, args.legacy_url, options.homing_nub_type))

    if output_path:
        with open(output_path, "w", encoding="utf-8") as output_file:
            json.dump(result, output_file, indent=2)

    logging.shutdown()


if __name__ == "__main__":
    app()
