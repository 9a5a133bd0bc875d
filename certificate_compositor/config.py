"""
Shared configuration, page geometry and field anchors.
"""

# Standard Library
import dataclasses
import datetime
import json
import pathlib
import typing
import uuid

# PIP3 modules
import reportlab.lib.pagesizes

# local repo modules
import certificate_compositor as cc
import certificate_compositor.errors


ConfigError = cc.errors.ConfigError

FONT_UNITS_PER_EM = 1000.0
INTERNAL_FONT_NAME = "CertificateFont"

DEFAULT_TEMPLATE_PATH = "/templates/certificate-template.png"
DEFAULT_FONT_PATH = "/fonts/NotoSerif-Regular.ttf"
DEFAULT_OUT_DIR = "out"
CALIBRATION_FILENAME = "calibrate.pdf"
CERTIFICATE_PREFIX = "Certificate_"

FALLBACK_BORDER_INSET = 20.0
FALLBACK_BORDER_WIDTH = 2.0

GRID_STEP = 50.0
GRID_LINE_WIDTH = 0.2
MARKER_HALF_SIZE = 5.0
MARKER_LINE_WIDTH = 1.0
MARKER_LABEL_OFFSET = 8.0
MARKER_LABEL_SIZE = 12.0

PROGRESS_BAR_WIDTH = 20

ANCHOR_ATTRIBUTES = ("x", "y", "size", "centered")


@dataclasses.dataclass(frozen=True)
class PageGeometry:
	width: float
	height: float

	@property
	def center_x(self) -> float:
		return self.width / 2.0


@dataclasses.dataclass(frozen=True)
class FieldAnchor:
	x: float
	y: float
	size: float
	centered: bool


@dataclasses.dataclass(frozen=True)
class FieldDefinition:
	key: str
	label: str
	anchor: FieldAnchor
	default: typing.Callable[[], str]
	prefix: str = ""

	@property
	def column(self) -> str:
		return self.key.lower()

	def default_value(self) -> str:
		return self.default()


@dataclasses.dataclass(frozen=True)
class RenderConfig:
	geometry: PageGeometry
	fields: tuple[FieldDefinition, ...]
	template_path: str
	font_path: str
	invariant: bool = False


#============================================
def landscape_geometry(pagesize: tuple[float, float]) -> PageGeometry:
	"""
	Build a landscape geometry from a portrait page size.

	Args:
		pagesize: Portrait (width, height) in points.

	Returns:
		PageGeometry with the axes swapped.
	"""
	portrait_width, portrait_height = pagesize
	return PageGeometry(width=portrait_height, height=portrait_width)


# A4 landscape, about 842 x 595 points
PAGE_GEOMETRY = landscape_geometry(reportlab.lib.pagesizes.A4)


#============================================
def placeholder(text: str) -> typing.Callable[[], str]:
	"""
	Build a default policy that returns fixed placeholder text.

	Args:
		text: Placeholder text.

	Returns:
		Zero-argument callable.
	"""
	def produce() -> str:
		return text
	return produce


#============================================
def today_iso() -> str:
	"""
	Return the current date as YYYY-MM-DD.
	"""
	return datetime.date.today().isoformat()


#============================================
def unique_token() -> str:
	"""
	Return a freshly generated certificate identifier.
	"""
	return str(uuid.uuid4())


#============================================
def build_default_fields(geometry: PageGeometry) -> tuple[FieldDefinition, ...]:
	"""
	Build the canonical field table in draw order.

	Args:
		geometry: Page geometry used for the horizontal center.

	Returns:
		Tuple of field definitions.
	"""
	center_x = geometry.center_x
	return (
		FieldDefinition(
			key="name",
			label="NAME",
			anchor=FieldAnchor(x=center_x, y=250.0, size=36.0, centered=True),
			default=placeholder("Student Name"),
		),
		FieldDefinition(
			key="course",
			label="COURSE",
			anchor=FieldAnchor(x=center_x, y=160.0, size=22.0, centered=True),
			default=placeholder("Course Title"),
		),
		FieldDefinition(
			key="date",
			label="DATE",
			anchor=FieldAnchor(x=250.0, y=100.0, size=16.0, centered=False),
			default=today_iso,
		),
		FieldDefinition(
			key="certId",
			label="ID",
			anchor=FieldAnchor(x=40.0, y=40.0, size=12.0, centered=False),
			default=unique_token,
			prefix="ID: ",
		),
	)


#============================================
def build_default_config(
	template_path: str = DEFAULT_TEMPLATE_PATH,
	font_path: str = DEFAULT_FONT_PATH,
	invariant: bool = False,
) -> RenderConfig:
	"""
	Build the default render configuration.

	Args:
		template_path: Template image identifier.
		font_path: Font identifier.
		invariant: Write deterministic PDF metadata.

	Returns:
		RenderConfig.
	"""
	return RenderConfig(
		geometry=PAGE_GEOMETRY,
		fields=build_default_fields(PAGE_GEOMETRY),
		template_path=template_path,
		font_path=font_path,
		invariant=invariant,
	)


#============================================
def find_field(config: RenderConfig, key: str) -> FieldDefinition:
	"""
	Look up a field definition by key.

	Args:
		config: Render configuration.
		key: Field key, matched case-insensitively.

	Returns:
		FieldDefinition.
	"""
	for field in config.fields:
		if field.column == key.lower():
			return field
	known = ", ".join(field.key for field in config.fields)
	raise ConfigError(f"Unknown field '{key}' (known fields: {known})")


#============================================
def with_resources(
	config: RenderConfig,
	template_path: str | None = None,
	font_path: str | None = None,
) -> RenderConfig:
	"""
	Return a copy of the config with replaced resource identifiers.

	Args:
		config: Render configuration.
		template_path: New template identifier, or None to keep.
		font_path: New font identifier, or None to keep.

	Returns:
		New RenderConfig.
	"""
	changes: dict[str, str] = {}
	if template_path is not None:
		changes["template_path"] = template_path
	if font_path is not None:
		changes["font_path"] = font_path
	return dataclasses.replace(config, **changes)


#============================================
def with_anchor(
	config: RenderConfig,
	key: str,
	x: float | None = None,
	y: float | None = None,
	size: float | None = None,
	centered: bool | None = None,
) -> RenderConfig:
	"""
	Return a copy of the config with one field anchor changed.

	Args:
		config: Render configuration.
		key: Field key.
		x: New horizontal position.
		y: New vertical position.
		size: New font size.
		centered: New horizontal-centering flag.

	Returns:
		New RenderConfig.
	"""
	target = find_field(config, key)
	anchor = target.anchor
	if x is not None:
		anchor = dataclasses.replace(anchor, x=float(x))
	if y is not None:
		anchor = dataclasses.replace(anchor, y=float(y))
	if size is not None:
		anchor = dataclasses.replace(anchor, size=float(size))
	if centered is not None:
		anchor = dataclasses.replace(anchor, centered=bool(centered))
	fields = tuple(
		dataclasses.replace(field, anchor=anchor) if field is target else field
		for field in config.fields
	)
	return dataclasses.replace(config, fields=fields)


#============================================
def load_anchor_overrides(path: pathlib.Path) -> dict[str, dict[str, typing.Any]]:
	"""
	Read anchor overrides from a JSON file.

	The file maps field keys to objects holding any of
	x, y, size and centered, for example {"name": {"y": 262}}.

	Args:
		path: JSON file path.

	Returns:
		Overrides keyed by field key.
	"""
	with path.open("r", encoding="utf-8") as handle:
		try:
			data = json.load(handle)
		except json.JSONDecodeError as err:
			raise ConfigError(f"Invalid anchor file {path}: {err}") from err
	if not isinstance(data, dict):
		raise ConfigError(f"Anchor file {path} must hold a JSON object")
	for key, values in data.items():
		if not isinstance(values, dict):
			raise ConfigError(f"Anchor override for '{key}' must be a JSON object")
	return data


#============================================
def apply_anchor_overrides(
	config: RenderConfig,
	overrides: dict[str, dict[str, typing.Any]],
) -> RenderConfig:
	"""
	Apply anchor overrides to a config.

	Args:
		config: Render configuration.
		overrides: Overrides keyed by field key.

	Returns:
		New RenderConfig.
	"""
	for key, values in overrides.items():
		unknown = sorted(set(values) - set(ANCHOR_ATTRIBUTES))
		if unknown:
			raise ConfigError(f"Unknown anchor attributes for '{key}': {', '.join(unknown)}")
		try:
			config = with_anchor(
				config,
				key,
				x=values.get("x"),
				y=values.get("y"),
				size=values.get("size"),
				centered=values.get("centered"),
			)
		except (TypeError, ValueError) as err:
			raise ConfigError(f"Invalid anchor value for '{key}': {err}") from err
	return config
