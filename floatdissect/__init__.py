from .errors import MalformedInput, UsageError
from .generalized import Category, DecodedValue, decode, enumerate_format
from .layout import FLOAT32, FLOAT64, FieldLayout
from .native import NativeReport, decode32, decode64

__all__ = [
	"Category",
	"DecodedValue",
	"FLOAT32",
	"FLOAT64",
	"FieldLayout",
	"MalformedInput",
	"NativeReport",
	"UsageError",
	"decode",
	"decode32",
	"decode64",
	"enumerate_format",
]
