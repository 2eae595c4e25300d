from floatdissect import FLOAT32, decode, decode32, decode64, enumerate_format
from floatdissect.generalized import render_listing_line
from floatdissect.layout import FieldLayout


def main() -> None:
	for x in (0.1, -2.5, 1e-40, float("inf"), float("nan")):
		print(decode32(x).render())
		print(decode64(x).render())

	report = decode32(1.0)
	print("Fields of 1.0f:", report.sign, report.e, report.f)
	print("Repacked:", hex(FLOAT32.pack(report.sign, report.e, report.f)))

	# Sign 1, exponent 000, fraction 11 of a 6-bit format.
	d = decode(1, 0b000, 3, 0b11, 2)
	print(d.render())
	print("Exact:", d.exact)

	tiny = FieldLayout(2, 2)
	for code, decoded in enumerate_format(tiny.exponent_bits, tiny.fraction_bits):
		print(render_listing_line(tiny, code, decoded))


if __name__ == "__main__":
	main()
