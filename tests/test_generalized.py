import math
from fractions import Fraction

import pytest

from floatdissect.errors import MalformedInput
from floatdissect.generalized import Category, decode, enumerate_format, render_listing_line
from floatdissect.layout import FieldLayout


def test_infinity():
	pos = decode(0, 255, 8, 0, 23)
	neg = decode(1, 255, 8, 0, 23)
	assert pos.category is Category.INFINITY
	assert neg.category is Category.INFINITY
	assert pos.render() == "   special:  +infinity"
	assert neg.render() == "   special:  -infinity"
	assert pos.value is None
	assert pos.exact is None


@pytest.mark.parametrize("f", [1, 0x400000, (1 << 23) - 1])
def test_nan_ignores_sign(f):
	pos = decode(0, 255, 8, f, 23)
	neg = decode(1, 255, 8, f, 23)
	assert pos.category is Category.NAN
	assert pos.render() == neg.render() == "   special:  NaN"


def test_positive_zero():
	d = decode(0, 0, 8, 0, 23)
	assert d.category is Category.DENORMAL
	assert d.bias == 127
	assert d.E == -126
	assert d.M == 0
	assert d.value == 0.0
	assert math.copysign(1.0, d.value) == 1.0


def test_negative_zero():
	d = decode(1, 0, 8, 0, 23)
	assert d.value == 0.0
	assert math.copysign(1.0, d.value) == -1.0


def test_normal_one():
	d = decode(0, 7, 4, 0, 3)
	assert d.category is Category.NORMAL
	assert d.bias == 7
	assert d.E == 0
	assert d.M == 8
	assert d.significand == 1.0
	assert d.value == 1.0
	assert d.render() == (
		"    normal:  sign=0  e=7  bias=7  E=0  2^E=1"
		"  f=0/8  M=8/8  2^E*M=8/8  val=1.000000"
	)


def test_negative_denormal():
	d = decode(1, 0, 3, 3, 2)
	assert d.category is Category.DENORMAL
	assert d.bias == 3
	assert d.E == -2
	assert (d.two_e_numer, d.two_e_denom) == (1, 4)
	assert d.M == 3
	assert d.significand == 0.75
	assert d.value == -0.1875
	assert (d.val_numer, d.val_denom) == (3, 16)
	assert d.exact == Fraction(-3, 16)
	assert d.render() == (
		"  denormal:  sign=1  e=0  bias=3  E=-2  2^E=1/4"
		"  f=3/4  M=3/4  2^E*M=3/16  val=-0.187500"
	)


def test_positive_exponent():
	d = decode(0, 5, 3, 2, 2)
	assert d.category is Category.NORMAL
	assert d.E == 2
	assert (d.two_e_numer, d.two_e_denom) == (4, 1)
	assert d.M == 6
	assert d.value == 6.0
	assert (d.val_numer, d.val_denom) == (24, 4)
	assert "2^E=4  f=2/4" in d.render()


def test_binary64_extremes():
	assert decode(0, 1, 11, 0, 52).value == 2.2250738585072014e-308
	smallest = decode(0, 0, 11, 1, 52)
	assert smallest.value == 5e-324
	assert smallest.exact == Fraction(1, 1 << 1074)
	largest = decode(0, 0x7FE, 11, (1 << 52) - 1, 52)
	assert largest.value == 1.7976931348623157e308


def test_value_outside_double_range():
	d = decode(0, (1 << 14) - 2, 14, 0, 3)
	assert d.category is Category.NORMAL
	assert d.value == math.inf
	assert d.exact == Fraction(1 << 8191)


@pytest.mark.parametrize("args", [
	(2, 0, 3, 0, 2),
	(0, 8, 3, 0, 2),
	(0, 0, 3, 4, 2),
	(0, -1, 3, 0, 2),
	(0, 0, 0, 0, 2),
	(0, 0, 3, 0, 0),
	(0, 0, 14, 0, 50),
	(0, 0, 20, 0, 4),
])
def test_malformed(args):
	with pytest.raises(MalformedInput):
		decode(*args)


def test_decode_is_idempotent():
	assert decode(1, 3, 4, 5, 3) == decode(1, 3, 4, 5, 3)
	assert decode(1, 3, 4, 5, 3).render() == decode(1, 3, 4, 5, 3).render()


@pytest.mark.parametrize("exponent_bits,fraction_bits", [(1, 1), (2, 2), (3, 2), (4, 3), (2, 6)])
def test_enumeration_covers_every_code(exponent_bits, fraction_bits):
	listing = list(enumerate_format(exponent_bits, fraction_bits))
	assert len(listing) == 2 * (1 << exponent_bits) * (1 << fraction_bits)
	assert [code for code, _ in listing] == list(range(1 << (1 + exponent_bits + fraction_bits)))


def test_enumeration_order_and_fields():
	layout = FieldLayout(3, 2)
	for code, decoded in enumerate_format(3, 2):
		assert (decoded.sign, decoded.e, decoded.f) == layout.split(code)
		assert decoded == decode(decoded.sign, decoded.e, 3, decoded.f, 2)
	listing = list(enumerate_format(3, 2))
	assert all(d.sign == 0 for _, d in listing[:32])
	assert all(d.sign == 1 for _, d in listing[32:])


def test_enumeration_category_counts():
	categories = [d.category for _, d in enumerate_format(3, 2)]
	assert categories.count(Category.INFINITY) == 2
	assert categories.count(Category.NAN) == 6
	assert categories.count(Category.DENORMAL) == 8
	assert categories.count(Category.NORMAL) == 48


def test_listing_lines():
	layout = FieldLayout(3, 2)
	listing = dict(enumerate_format(3, 2))
	assert render_listing_line(layout, 0, listing[0]) == (
		"0 000 00" + " " * 8 + "0"
		+ "  denormal:  sign=0  e=0  bias=3  E=-2  2^E=1/4  f=0/4  M=0/4  2^E*M=0/16  val=0.000000"
	)
	assert render_listing_line(layout, 0x3F, listing[0x3F]) == (
		"1 111 11" + " " * 7 + "3f" + "   special:  NaN"
	)
	assert render_listing_line(layout, 0x3C, listing[0x3C]) == (
		"1 111 00" + " " * 7 + "3c" + "   special:  -infinity"
	)
