class MalformedInput(ValueError):
	"""Bit widths or field values fall outside their declared domain."""


class UsageError(Exception):
	"""Wrong number of command-line arguments."""
