from __future__ import annotations

import argparse
import enum
import logging
import os
import re
import sys
from typing import List, Optional, Sequence, TextIO

from .errors import MalformedInput, UsageError
from .generalized import decode, enumerate_format, render_listing_line
from .layout import FieldLayout
from .native import decode32, decode64


_LOG = logging.getLogger(__name__)

USAGE = (
	"Usage: fp <number>\n"
	"       fp <exp_len> <sig_len>\n"
	"       fp <sign_bit> <exp_bits> <sig_bits>\n"
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "%(levelname).2s%(asctime)s;%(process)d;%(module)s: %(message)s"


def default_log_level() -> str:
	level = os.getenv("LOG_LEVEL", "WARNING").upper()
	return level if level in LOG_LEVELS else "WARNING"


def setup_logging(level: str) -> None:
	handler = logging.StreamHandler(sys.stderr)
	handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
	logging.basicConfig(level=level.upper(), handlers=[handler])


class Mode(enum.Enum):
	NUMBER = 1
	ENUMERATE = 2
	BITS = 3


def parse_mode(values: Sequence[str]) -> Mode:
	try:
		return Mode(len(values))
	except ValueError:
		raise UsageError(f"expected 1, 2 or 3 arguments, got {len(values)}") from None


def _parse_number(text: str) -> float:
	try:
		if "0x" in text.lower():
			return float.fromhex(text)
		return float(text)
	except ValueError:
		raise MalformedInput(f"not a floating-point literal: {text!r}") from None


def _parse_bitstring(text: str, what: str) -> int:
	if re.fullmatch("[01]+", text) is None:
		raise MalformedInput(f"{what} is not a string of 0 and 1 digits: {text!r}")
	return int(text, 2)


def _parse_int(text: str, base: int, what: str) -> int:
	try:
		return int(text, base)
	except ValueError:
		raise MalformedInput(f"{what} is not a base-{base} integer: {text!r}") from None


def run(values: Sequence[str], out: TextIO) -> None:
	"""Dispatch on the argument count and write the report to `out`."""
	mode = parse_mode(values)
	_LOG.debug("Dispatching %s with %s", mode.name, list(values))

	if mode is Mode.NUMBER:
		number = _parse_number(values[0])
		out.write(decode32(number).render() + "\n")
		out.write(decode64(number).render() + "\n")
	elif mode is Mode.ENUMERATE:
		layout = FieldLayout(_parse_int(values[0], 10, "exponent width"),
							 _parse_int(values[1], 10, "fraction width"))
		for code, decoded in enumerate_format(layout.exponent_bits, layout.fraction_bits):
			out.write(render_listing_line(layout, code, decoded) + "\n")
	else:
		sign_str, exp_str, sig_str = values
		decoded = decode(_parse_bitstring(sign_str, "sign"),
						 _parse_bitstring(exp_str, "exponent"), len(exp_str),
						 _parse_bitstring(sig_str, "fraction"), len(sig_str))
		out.write(decoded.render() + "\n")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="fp",
		description="Show the bit-level structure of binary floating-point numbers.",
		formatter_class=argparse.ArgumentDefaultsHelpFormatter,
		add_help=False,
	)
	parser.add_argument("values", nargs="*",
						help="<number> | <exp_len> <sig_len> | <sign_bit> <exp_bits> <sig_bits>")
	parser.add_argument("--log-level", default=default_log_level(),
						choices=LOG_LEVELS,
						type=str.upper,
						help="Logging level (records go to standard error)")
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	# Literals such as "-inf" or "-1e5" look like options to argparse.
	args, values = build_parser().parse_known_args(argv)
	values = args.values + values
	setup_logging(args.log_level)

	try:
		if any(v in ("-h", "--help") for v in values):
			raise UsageError("help requested")
		run(values, sys.stdout)
	except UsageError as ex:
		_LOG.debug("Usage error: %s", ex)
		sys.stdout.write(USAGE)
		return 1
	except MalformedInput as ex:
		sys.stderr.write(f"error: {ex}\n")
		return 1
	return 0


if __name__ == "__main__":
	sys.exit(main())
