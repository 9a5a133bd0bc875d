"""
Batch generation from a CSV table with a header row.
"""

# Standard Library
import contextlib
import csv
import dataclasses
import enum
import io
import json
import pathlib
import re
import typing

# local repo modules
import certificate_compositor as cc
import certificate_compositor.compositor
import certificate_compositor.config
import certificate_compositor.errors
import certificate_compositor.resources


RenderConfig = cc.config.RenderConfig
FieldDefinition = cc.config.FieldDefinition
SourceEmptyError = cc.errors.SourceEmptyError
MissingColumnError = cc.errors.MissingColumnError
RowFieldMissingError = cc.errors.RowFieldMissingError
SourceFormatError = cc.errors.SourceFormatError

CERTIFICATE_PREFIX = cc.config.CERTIFICATE_PREFIX
PROGRESS_BAR_WIDTH = cc.config.PROGRESS_BAR_WIDTH

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class RowPolicy(enum.Enum):
	# blank or missing cells take the field default
	DEFAULT = "default"
	# blank or missing cells reject the row and halt the run
	STRICT = "strict"


@dataclasses.dataclass
class BatchResult:
	source: str
	rows_read: int
	rendered: list[pathlib.Path]
	defaults_applied: int
	skipped_blank_rows: int


#============================================
def sanitize_filename(value: str) -> str:
	"""
	Replace every character outside [A-Za-z0-9._-] with an underscore.

	Args:
		value: Untrusted text, e.g. a recipient name.

	Returns:
		Filesystem safe string of the same length.
	"""
	return UNSAFE_FILENAME_CHARS.sub("_", value)


#============================================
def certificate_filename(name: str) -> str:
	"""
	Build the output filename for a recipient.

	Args:
		name: Recipient name.

	Returns:
		Filename like "Certificate_Alice.pdf".
	"""
	return sanitize_filename(f"{CERTIFICATE_PREFIX}{name}.pdf")


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
@contextlib.contextmanager
def open_table_source(identifier: str) -> typing.Iterator[typing.TextIO]:
	"""
	Open a CSV source, trying the filesystem before packaged data.

	Args:
		identifier: CSV path or packaged resource identifier.

	Yields:
		Text stream positioned at the header row.
	"""
	stream = cc.resources.require(
		identifier,
		"CSV",
		cc.resources.TABLE_SOURCE_STRATEGIES,
	)
	with stream:
		# utf-8-sig drops the byte order mark spreadsheet exports add
		text = io.TextIOWrapper(stream, encoding="utf-8-sig", newline="")
		try:
			yield text
		finally:
			text.detach()


#============================================
def build_column_mapping(
	header: list[str],
	fields: typing.Sequence[FieldDefinition],
) -> dict[str, int]:
	"""
	Map lower-cased, trimmed header cells to column indexes.

	Args:
		header: Header row cells.
		fields: Required fields.

	Returns:
		Mapping from column name to zero-based index.
	"""
	mapping: dict[str, int] = {}
	for index, cell in enumerate(header):
		mapping[cell.strip().lower()] = index
	for field in fields:
		if field.column not in mapping:
			raise MissingColumnError(field.key)
	return mapping


#============================================
def read_cell(row: list[str], index: int | None) -> str | None:
	"""
	Read a trimmed cell, returning None if it is absent or blank.

	Args:
		row: Row cells.
		index: Column index.

	Returns:
		Trimmed cell value or None.
	"""
	if index is None or index < 0 or index >= len(row):
		return None
	value = row[index]
	if value is None or not value.strip():
		return None
	return value.strip()


#============================================
def extract_row_values(
	row: list[str],
	mapping: dict[str, int],
	fields: typing.Sequence[FieldDefinition],
	policy: RowPolicy,
	row_number: int,
) -> tuple[dict[str, str], int]:
	"""
	Extract field values from one data row.

	Args:
		row: Row cells.
		mapping: Column mapping from the header.
		fields: Field definitions.
		policy: Handling of absent or blank cells.
		row_number: One-based data row number for error messages.

	Returns:
		Tuple of (values keyed by field key, number of defaults applied).
	"""
	values: dict[str, str] = {}
	defaults_applied = 0
	for field in fields:
		value = read_cell(row, mapping.get(field.column))
		if value is None:
			if policy is RowPolicy.STRICT:
				raise RowFieldMissingError(row_number, field.key)
			value = field.default_value()
			defaults_applied += 1
		values[field.key] = value
	return (values, defaults_applied)


#============================================
def run_batch(
	source: str,
	out_dir: pathlib.Path,
	config: RenderConfig,
	policy: RowPolicy = RowPolicy.DEFAULT,
) -> BatchResult:
	"""
	Render one certificate per CSV data row.

	The header is validated before any row is rendered. The first
	failing row halts the run; files already written are kept.

	Args:
		source: CSV path or packaged resource identifier.
		out_dir: Output directory.
		config: Render configuration.
		policy: Handling of absent or blank cells.

	Returns:
		BatchResult.
	"""
	out_dir = pathlib.Path(out_dir)
	try:
		with open_table_source(source) as handle:
			rows = list(csv.reader(handle))
	except (UnicodeDecodeError, csv.Error) as err:
		raise SourceFormatError(f"Cannot read CSV {source}: {err}") from err
	if not rows:
		raise SourceEmptyError(f"Empty CSV: {source}")
	mapping = build_column_mapping(rows[0], config.fields)
	data_rows = rows[1:]
	print(f"CSV rows found: {len(data_rows)}")

	result = BatchResult(
		source=source,
		rows_read=0,
		rendered=[],
		defaults_applied=0,
		skipped_blank_rows=0,
	)
	name_field = cc.config.find_field(config, "name")
	for row_number, row in enumerate(data_rows, start=1):
		result.rows_read += 1
		# csv yields [] for a line with no cells at all
		if not row and policy is RowPolicy.DEFAULT:
			result.skipped_blank_rows += 1
			continue
		values, defaults_applied = extract_row_values(
			row,
			mapping,
			config.fields,
			policy,
			row_number,
		)
		result.defaults_applied += defaults_applied
		output_path = out_dir / certificate_filename(values[name_field.key])
		request = cc.compositor.CertificateRequest(values=values, output_path=output_path)
		cc.compositor.render_certificate(request, config)
		result.rendered.append(output_path)
		print_progress("Rendering", row_number, len(data_rows))
	if data_rows:
		print()
	return result


#============================================
def write_batch_manifest(
	manifest_path: pathlib.Path,
	result: BatchResult,
	config: RenderConfig,
) -> None:
	"""
	Write a manifest JSON file describing a batch run.

	Args:
		manifest_path: Output path.
		result: Batch result.
		config: Render configuration.
	"""
	data = {
		"source": result.source,
		"rows_read": result.rows_read,
		"rendered": [str(path) for path in result.rendered],
		"defaults_applied": result.defaults_applied,
		"skipped_blank_rows": result.skipped_blank_rows,
		"resources": {
			"template": config.template_path,
			"font": config.font_path,
		},
		"page": {
			"width": config.geometry.width,
			"height": config.geometry.height,
		},
		"anchors": {
			field.key: dataclasses.asdict(field.anchor)
			for field in config.fields
		},
	}
	manifest_path.parent.mkdir(parents=True, exist_ok=True)
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
