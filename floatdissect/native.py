from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .layout import FLOAT32, FLOAT64, FieldLayout


_LOG = logging.getLogger(__name__)


def _logb(value: float) -> float:
	"""Binary exponent of |value| the way C logb() reports it.

	Subnormals are treated as if normalized, zero maps to -inf, infinities to
	+inf and NaN is returned as is, sign included.
	"""
	if math.isnan(value):
		return value
	if math.isinf(value):
		return math.inf
	if value == 0.0:
		return -math.inf
	_, exp = np.frexp(value)
	return float(exp) - 1.0


def _format_float(value: float, spec: str) -> str:
	"""format() that keeps the sign of a negative NaN, as C printf does."""
	text = format(value, spec)
	if math.isnan(value) and math.copysign(1.0, value) < 0:
		return "-" + text
	return text


@dataclass(frozen=True)
class NativeReport:
	"""Bit-level view of a native binary32/binary64 value.

	`flog` and `flog_biased` are an approximate diagnostic taken from logb();
	for zero, subnormals, infinities and NaN they differ from the stored
	exponent field `e`, which is the authoritative one.
	"""

	value: float
	bits: int
	layout: FieldLayout
	sign: int
	e: int
	f: int
	flog: float
	flog_biased: float
	digits: int

	@property
	def bit_string(self) -> str:
		return self.layout.bit_string(self.bits)

	def render(self) -> str:
		value = _format_float(self.value, "e")
		flog = _format_float(self.flog, "f")
		flog_biased = _format_float(self.flog_biased, "f")
		decimal = _format_float(self.value, f".{self.digits}f")
		if self.layout.total_bits == 32:
			return (
				f"32-bit: {value}  {self.bit_string} (0x{self.bits:x})"
				f"  sign={self.sign} exp={flog} ({flog_biased})"
				f"  value={decimal}"
			)
		return (
			f"64-bit: {value}  {self.bit_string} (0x{self.bits:x})"
			f" sign={self.sign} exp={flog} ({flog_biased})"
			f"  value={decimal}"
		)


def _decode_native(value: np.floating, uint_dtype: np.dtype, layout: FieldLayout, digits: int) -> NativeReport:
	bits = int(value.view(uint_dtype))
	sign, e, f = layout.split(bits)
	as_float = float(value)
	flog = _logb(as_float)
	report = NativeReport(
		value=as_float,
		bits=bits,
		layout=layout,
		sign=sign,
		e=e,
		f=f,
		flog=flog,
		flog_biased=flog if math.isnan(flog) else flog + layout.bias,
		digits=digits,
	)
	_LOG.debug("Native %d-bit decode of %r: bits=0x%x sign=%d e=%d f=%d",
			   layout.total_bits, as_float, bits, sign, e, f)
	return report


def decode32(value: float) -> NativeReport:
	"""Expose the binary32 encoding of `value` (narrowed from double if needed)."""
	with np.errstate(over="ignore", under="ignore"):
		narrowed = np.float32(value)
	return _decode_native(narrowed, np.uint32, FLOAT32, 11)


def decode64(value: float) -> NativeReport:
	"""Expose the binary64 encoding of `value`."""
	return _decode_native(np.float64(value), np.uint64, FLOAT64, 19)
