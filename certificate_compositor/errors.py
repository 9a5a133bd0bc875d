"""
Error kinds raised by the compositing engine.
"""


#============================================
class CertificateError(Exception):
	"""
	Base class for every failure the CLI reports as a final message.
	"""


#============================================
class ConfigError(CertificateError):
	"""
	Invalid configuration value or anchor override.
	"""


#============================================
class ResourceNotFoundError(CertificateError):
	"""
	A required resource matched no lookup strategy.
	"""

	def __init__(self, kind: str, identifier: str) -> None:
		self.kind = kind
		self.identifier = identifier
		super().__init__(f"{kind} not found: {identifier}")


#============================================
class SourceEmptyError(CertificateError):
	"""
	Tabular source has no header row.
	"""


#============================================
class MissingColumnError(CertificateError):
	"""
	Header row lacks a required column.
	"""

	def __init__(self, column: str) -> None:
		self.column = column
		super().__init__(f"CSV missing column: {column}")


#============================================
class RowFieldMissingError(CertificateError):
	"""
	Strict row policy found an absent or blank required cell.
	"""

	def __init__(self, row_number: int, column: str) -> None:
		self.row_number = row_number
		self.column = column
		super().__init__(f"Row {row_number}: missing value for column '{column}'")


#============================================
class OutputPathError(CertificateError):
	"""
	Output document could not be written.
	"""


#============================================
class FontLoadError(CertificateError):
	"""
	Font resource exists but is not a usable TrueType font.
	"""


#============================================
class SourceFormatError(CertificateError):
	"""
	Tabular source cannot be decoded or parsed as CSV.
	"""
