from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import MalformedInput


MAX_TOTAL_BITS = 64
# Keeps the exact 2^E numerator/denominator printable as decimal integers.
MAX_EXPONENT_BITS = 14


def _smallest_uint_dtype_for_bits(total_bits: int) -> np.dtype:
	if total_bits <= 8:
		return np.uint8
	elif total_bits <= 16:
		return np.uint16
	elif total_bits <= 32:
		return np.uint32
	elif total_bits <= MAX_TOTAL_BITS:
		return np.uint64
	else:
		raise MalformedInput(f"Total bits must be <= {MAX_TOTAL_BITS}, got {total_bits}")


def format_bits(value: int, width: int) -> str:
	"""Render the low `width` bits of `value`, most-significant first."""
	return format(value & ((1 << width) - 1), f"0{width}b") if width > 0 else ""


@dataclass(frozen=True)
class FieldLayout:
	"""Partition of a binary floating-point word into [sign | exponent | fraction].

	The sign is always a single bit. The exponent bias is 2^(exponent_bits-1) - 1.
	Both widths must be >= 1, the exponent at most MAX_EXPONENT_BITS wide, and
	the whole word must fit into a native 64-bit unsigned integer; anything
	else raises MalformedInput.
	"""

	exponent_bits: int
	fraction_bits: int

	def __post_init__(self):
		if self.exponent_bits < 1:
			raise MalformedInput(f"exponent width must be >= 1, got {self.exponent_bits}")
		if self.exponent_bits > MAX_EXPONENT_BITS:
			raise MalformedInput(f"exponent width must be <= {MAX_EXPONENT_BITS}, got {self.exponent_bits}")
		if self.fraction_bits < 1:
			raise MalformedInput(f"fraction width must be >= 1, got {self.fraction_bits}")
		total_bits = 1 + self.exponent_bits + self.fraction_bits
		object.__setattr__(self, "total_bits", total_bits)
		object.__setattr__(self, "storage_dtype", _smallest_uint_dtype_for_bits(total_bits))
		object.__setattr__(self, "bias", (1 << (self.exponent_bits - 1)) - 1)
		# Masks and shifts
		fraction_mask = (1 << self.fraction_bits) - 1
		exponent_mask = (1 << self.exponent_bits) - 1
		sign_shift = self.fraction_bits + self.exponent_bits
		object.__setattr__(self, "_fraction_mask", fraction_mask)
		object.__setattr__(self, "_exponent_mask", exponent_mask)
		object.__setattr__(self, "_sign_shift", sign_shift)
		object.__setattr__(self, "_exponent_shift", self.fraction_bits)
		object.__setattr__(self, "exp_all_ones", exponent_mask)

	@property
	def dtype(self) -> np.dtype:
		return self.storage_dtype

	def check_fields(self, sign: int, e: int, f: int) -> None:
		if sign not in (0, 1):
			raise MalformedInput(f"sign must be 0 or 1, got {sign}")
		if not 0 <= e <= self._exponent_mask:
			raise MalformedInput(f"exponent field {e} does not fit in {self.exponent_bits} bits")
		if not 0 <= f <= self._fraction_mask:
			raise MalformedInput(f"fraction field {f} does not fit in {self.fraction_bits} bits")

	def split(self, bits: int) -> Tuple[int, int, int]:
		"""Split a packed word into its (sign, exponent, fraction) fields."""
		if not 0 <= bits < (1 << self.total_bits):
			raise MalformedInput(f"value 0x{bits:x} does not fit in {self.total_bits} bits")
		sign = (bits >> self._sign_shift) & 0x1
		e = (bits >> self._exponent_shift) & self._exponent_mask
		f = bits & self._fraction_mask
		return sign, e, f

	def pack(self, sign: int, e: int, f: int) -> int:
		self.check_fields(sign, e, f)
		return (sign << self._sign_shift) | (e << self._exponent_shift) | f

	def view_fields(self, packed: np.ndarray) -> np.ndarray:
		"""Return a structured view exposing sign/exponent/fraction as integer fields."""
		packed = np.asarray(packed, dtype=self.storage_dtype)
		sign = ((packed >> self._sign_shift) & 0x1).astype(self.storage_dtype)
		exponent = ((packed >> self._exponent_shift) & self._exponent_mask).astype(self.storage_dtype)
		fraction = (packed & self._fraction_mask).astype(self.storage_dtype)
		dtype = np.dtype([
			("sign", self.storage_dtype),
			("exponent", self.storage_dtype),
			("fraction", self.storage_dtype),
		])
		out = np.empty(packed.shape, dtype=dtype)
		out["sign"] = sign
		out["exponent"] = exponent
		out["fraction"] = fraction
		return out

	def bit_string(self, bits: int) -> str:
		"""Grouped binary rendering: sign, exponent and fraction separated by spaces."""
		sign, e, f = self.split(bits)
		return " ".join((
			format_bits(sign, 1),
			format_bits(e, self.exponent_bits),
			format_bits(f, self.fraction_bits),
		))


FLOAT32 = FieldLayout(8, 23)
FLOAT64 = FieldLayout(11, 52)
