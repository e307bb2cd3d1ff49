#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
QR для оплаты по стандарту НБУ (формат 003): создание ссылки/изображения
из реквизитов платежа и разбор готовой ссылки обратно в поля.
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from config import get_config
from nbu_codec import NBUQRError, ValidationError
from nbu_fields import ENCODINGS, FUNCTION_ICT, FUNCTIONS, ENCODING_WIN1251, QRFields
from nbu_qr import KIND_PNG, KIND_SVG, NBUQRGenerator

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> datetime:
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD HH:MM[:SS], got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build or parse NBU payment QR links (https://qr.bank.gov.ua/, format 003)."
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--base-url",
        default=None,
        help="Base URL of the QR link (default: NBU_QR_BASE_URL or https://qr.bank.gov.ua/)",
    )
    common.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", parents=[common], help="Payment fields -> URL or QR image")
    enc.add_argument("--function", default=FUNCTION_ICT, choices=FUNCTIONS)
    enc.add_argument("--encoding", default=ENCODING_WIN1251, choices=ENCODINGS)
    enc.add_argument("--recipient", default="", help="Recipient name (max 140)")
    enc.add_argument("--account", default="", help="IBAN UA + 27 digits")
    enc.add_argument("--amount", default=None, help="Amount in UAH, e.g. 100.50")
    enc.add_argument("--currency", default="UAH")
    enc.add_argument("--recipient-code", default="", help="EDRPOU / tax number (max 10)")
    enc.add_argument("--category", default="")
    enc.add_argument("--reference", default="")
    enc.add_argument("--purpose", default="", help="Payment purpose (max 420)")
    enc.add_argument("--display", default="")
    enc.add_argument("--lock-mask", default="", help="4 uppercase hex digits")
    enc.add_argument("--valid-until", type=_parse_timestamp, default=None)
    enc.add_argument("--created-at", type=_parse_timestamp, default=None)
    enc.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write QR image instead of printing the URL (.svg or .png)",
    )
    enc.add_argument(
        "--data-uri",
        action="store_true",
        help="Print the QR as a data:image/png;base64 URI",
    )

    dec = sub.add_parser("decode", parents=[common], help="URL -> payment fields")
    dec.add_argument("url", help="QR link to parse")
    return parser


def _encode(args: argparse.Namespace, cfg: dict) -> int:
    gen = NBUQRGenerator(
        base_url=args.base_url or cfg["base_url"],
        function=args.function,
        encoding=args.encoding,
        recipient=args.recipient,
        account=args.account,
        amount=args.amount,
        currency=args.currency,
        recipient_code=args.recipient_code,
        category=args.category,
        reference=args.reference,
        purpose=args.purpose,
        display=args.display,
        lock_mask=args.lock_mask,
        valid_until=args.valid_until,
        created_at=args.created_at,
    )
    if not gen.is_valid:
        for err in gen.errors:
            print(f"Error: {err}", file=sys.stderr)
        return 1

    render_opts = {"scale": cfg["scale"], "border": cfg["border"]}
    logger.debug("Encoding for %s", gen.base_url)
    if args.output is not None:
        suffix = args.output.suffix.lower()
        if suffix == "." + KIND_SVG:
            args.output.write_text(gen.render_svg(**render_opts), encoding="utf-8")
        elif suffix == "." + KIND_PNG:
            args.output.write_bytes(gen.render_png(**render_opts))
        else:
            print(f"Error: unsupported output format: {args.output.suffix or args.output}", file=sys.stderr)
            return 1
        print(f"Written: {args.output}")
    elif args.data_uri:
        print(gen.render_data_uri(**render_opts))
    else:
        print(gen.generate_url())
    return 0


def _decode(args: argparse.Namespace, cfg: dict) -> int:
    gen = NBUQRGenerator(base_url=args.base_url or cfg["base_url"])
    parsed = gen.parse_url(args.url)
    logger.debug("Parsed QR link, function %s", parsed.function)
    for name, value in zip(QRFields.slot_names(), parsed.to_parts()):
        print(f"{name}: {value}")
    return 0


def _log_level(name: str, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    level = getattr(logging, name, None)
    if not isinstance(level, int):
        return logging.WARNING
    return level


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = get_config()
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=_log_level(cfg["log_level"], args.debug),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        if args.command == "encode":
            return _encode(args, cfg)
        return _decode(args, cfg)
    except ValidationError as e:
        for err in e.errors:
            print(f"Error: {err}", file=sys.stderr)
        return 1
    except (NBUQRError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
