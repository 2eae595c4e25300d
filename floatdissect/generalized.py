from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterator, Optional, Tuple

import numpy as np

from .layout import FieldLayout, format_bits


_LOG = logging.getLogger(__name__)


class Category(enum.Enum):
	INFINITY = "infinity"
	NAN = "NaN"
	NORMAL = "normal"
	DENORMAL = "denormal"


@dataclass(frozen=True)
class DecodedValue:
	"""Every intermediate quantity of a sign/exponent/fraction decode.

	Special values (infinity and NaN) carry no numeric fields; these are left
	as None. For normal and denormal values the exact value is
	val_numer / val_denom (unreduced), and `value` is its floating-point
	approximation.
	"""

	sign: int
	e: int
	f: int
	layout: FieldLayout
	category: Category
	E: Optional[int] = None
	two_e_numer: Optional[int] = None
	two_e_denom: Optional[int] = None
	M: Optional[int] = None
	val_numer: Optional[int] = None
	val_denom: Optional[int] = None
	significand: Optional[float] = None
	value: Optional[float] = None

	@property
	def bias(self) -> int:
		return self.layout.bias

	@property
	def denom(self) -> int:
		return 1 << self.layout.fraction_bits

	@property
	def is_special(self) -> bool:
		return self.category in (Category.INFINITY, Category.NAN)

	@property
	def exact(self) -> Optional[Fraction]:
		if self.is_special:
			return None
		return (-1 if self.sign else 1) * Fraction(self.val_numer, self.val_denom)

	@property
	def label(self) -> str:
		if self.category is Category.INFINITY:
			return ("-" if self.sign else "+") + "infinity"
		return self.category.value

	def render(self) -> str:
		if self.is_special:
			return f"   special:  {self.label}"
		two_e = f"{self.two_e_numer}"
		if self.two_e_denom > 1:
			two_e = f"{two_e}/{self.two_e_denom}"
		return (
			f"  {self.label:>8s}:  sign={self.sign}  e={self.e}  bias={self.bias}"
			f"  E={self.E}  2^E={two_e}"
			f"  f={self.f}/{self.denom}  M={self.M}/{self.denom}"
			f"  2^E*M={self.val_numer}/{self.val_denom}  val={self.value:f}"
		)


def decode(sign: int, e: int, exponent_bits: int, f: int, fraction_bits: int) -> DecodedValue:
	"""Decode a sign/exponent/fraction triple of arbitrary field widths.

	Raises MalformedInput when a width is not positive, the word would not fit
	in 64 bits, or a field does not fit its width.
	"""
	layout = FieldLayout(exponent_bits, fraction_bits)
	layout.check_fields(sign, e, f)

	if e == layout.exp_all_ones:
		category = Category.INFINITY if f == 0 else Category.NAN
		_LOG.debug("Special encoding sign=%d e=%d f=%d: %s", sign, e, f, category.name)
		return DecodedValue(sign=sign, e=e, f=f, layout=layout, category=category)

	normal = e != 0
	E = e - layout.bias if normal else 1 - layout.bias
	if E < 0:
		two_e_numer, two_e_denom = 1, 1 << -E
	else:
		two_e_numer, two_e_denom = 1 << E, 1

	denom = 1 << fraction_bits
	M = f + denom if normal else f
	significand = M / denom
	sign_value = -1.0 if sign == 1 else 1.0
	# Exponents of wide formats fall outside the double range.
	with np.errstate(over="ignore", under="ignore"):
		value = float(np.ldexp(sign_value * significand, E))

	decoded = DecodedValue(
		sign=sign,
		e=e,
		f=f,
		layout=layout,
		category=Category.NORMAL if normal else Category.DENORMAL,
		E=E,
		two_e_numer=two_e_numer,
		two_e_denom=two_e_denom,
		M=M,
		val_numer=two_e_numer * M,
		val_denom=two_e_denom * denom,
		significand=significand,
		value=value,
	)
	_LOG.debug("Decoded sign=%d e=%d f=%d as %s E=%d M=%d", sign, e, f, decoded.label, E, M)
	return decoded


def enumerate_format(exponent_bits: int, fraction_bits: int) -> Iterator[Tuple[int, DecodedValue]]:
	"""Yield (code, decoded) for every encoding of the format, in code order.

	Code order lists positive values before negative ones, with the exponent
	varying slowest.
	"""
	layout = FieldLayout(exponent_bits, fraction_bits)
	_LOG.debug("Enumerating %d encodings of a 1/%d/%d format",
			   1 << layout.total_bits, exponent_bits, fraction_bits)
	# Chunked so the widest formats do not materialize all codes at once.
	chunk = 1 << 16
	for start in range(0, 1 << layout.total_bits, chunk):
		stop = min(start + chunk, 1 << layout.total_bits)
		codes = np.arange(start, stop, dtype=layout.dtype)
		fields = layout.view_fields(codes)
		for code, sign, e, f in zip(codes.tolist(), fields["sign"].tolist(),
									fields["exponent"].tolist(), fields["fraction"].tolist()):
			yield code, decode(sign, e, exponent_bits, f, fraction_bits)


def render_listing_line(layout: FieldLayout, code: int, decoded: DecodedValue) -> str:
	"""One line of a format listing: grouped raw bits, hex code, decoded fields."""
	return (
		f"{decoded.sign} {format_bits(decoded.e, layout.exponent_bits)}"
		f" {format_bits(decoded.f, layout.fraction_bits)} {code:8x}{decoded.render()}"
	)
