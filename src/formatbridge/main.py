#!/usr/bin/env python3
"""Command-line interface for format detection and conversion.

Usage:
    formatbridge detect PATH
    formatbridge convert PATH --to {json,xml,serialized} [--root NAME] [--policy POLICY]

PATH may be "-" to read from stdin.
"""

import argparse
import logging
import sys
from pathlib import Path

from .core.config import converter_config
from .core.logging import setup_logging
from .models.models import DetectionReport, FormatTag, XmlEncodingPolicy
from .services.converter import to_json, to_serialized, to_xml
from .services.domain.detection import identify, type_name
from .services.domain.serialized import SerializedDecodeError
from .services.domain.tree import InvalidTypeError, NestingTooDeepError
from .services.domain.xml_tree import XmlParseError, xml_to_node

logger = logging.getLogger(__name__)

TARGETS = {
    "json": to_json,
    "serialized": to_serialized,
}


def read_input(path: str) -> str:
    """Read the document at path ("-" for stdin)."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def run_detect(args: argparse.Namespace) -> int:
    """Print a DetectionReport for the input document."""
    text = read_input(args.path)
    tag, _ = identify(text)
    report = DetectionReport(format=tag, type_name=type_name(text), size=len(text))
    print(report.model_dump_json())
    return 0


def run_convert(args: argparse.Namespace) -> int:
    """Convert the input document and print the result."""
    text = read_input(args.path)
    source = text

    # XML passes through untouched unless a policy was asked for explicitly
    tag, payload = identify(text)
    if tag is FormatTag.XML and (args.policy or args.to != "xml"):
        policy = args.policy or converter_config.DEFAULT_XML_POLICY
        logger.info(f"Decoding XML input with policy {policy}")
        source = xml_to_node(payload, policy)

    if args.to == "xml":
        output = to_xml(source, root_name=args.root)
    else:
        output = TARGETS[args.to](source)

    print(output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formatbridge",
        description="Detect and convert between JSON, XML and serialized documents",
    )
    parser.add_argument("--log-level", default=None, help="Override CONVERTER_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser("detect", help="Report the format of a document")
    detect_parser.add_argument("path", help="Input file, or - for stdin")
    detect_parser.set_defaults(handler=run_detect)

    convert_parser = subparsers.add_parser("convert", help="Convert a document to another format")
    convert_parser.add_argument("path", help="Input file, or - for stdin")
    convert_parser.add_argument("--to", required=True, choices=["json", "xml", "serialized"], help="Target format")
    convert_parser.add_argument("--root", default=None, help="Root element name for XML output")
    convert_parser.add_argument(
        "--policy",
        default=None,
        choices=[policy.value for policy in XmlEncodingPolicy],
        help=f"Attribute policy for XML input (default: {converter_config.DEFAULT_XML_POLICY})",
    )
    convert_parser.set_defaults(handler=run_convert)

    return parser


def main(argv: list[str] = None) -> int:
    """Entry point for the formatbridge command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        return args.handler(args)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {args.path}: {e}")
        return 1
    except (XmlParseError, SerializedDecodeError, InvalidTypeError, NestingTooDeepError) as e:
        logger.error(f"Conversion failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
