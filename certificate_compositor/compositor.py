"""
Certificate compositing: template background plus text fields.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import certificate_compositor as cc
import certificate_compositor.config
import certificate_compositor.errors
import certificate_compositor.metrics
import certificate_compositor.resources


RenderConfig = cc.config.RenderConfig
FieldDefinition = cc.config.FieldDefinition
PageGeometry = cc.config.PageGeometry
OutputPathError = cc.errors.OutputPathError

INTERNAL_FONT_NAME = cc.config.INTERNAL_FONT_NAME
FALLBACK_BORDER_INSET = cc.config.FALLBACK_BORDER_INSET
FALLBACK_BORDER_WIDTH = cc.config.FALLBACK_BORDER_WIDTH

BACKGROUND_TEMPLATE = "template"
BACKGROUND_BORDER = "border"


@dataclasses.dataclass
class CertificateRequest:
	values: dict[str, str]
	output_path: pathlib.Path


@dataclasses.dataclass(frozen=True)
class FieldPlacement:
	key: str
	text: str
	x: float
	y: float
	size: float


@dataclasses.dataclass
class RenderedDocument:
	output_path: pathlib.Path
	background: str
	placements: tuple[FieldPlacement, ...]


#============================================
def resolve_values(config: RenderConfig, **values: str | None) -> dict[str, str]:
	"""
	Apply each field's default to missing or blank values.

	Args:
		config: Render configuration.
		values: Field values keyed by field key.

	Returns:
		Trimmed values for every configured field.
	"""
	resolved: dict[str, str] = {}
	for field in config.fields:
		value = values.get(field.key)
		if value is None or not value.strip():
			value = field.default_value()
		resolved[field.key] = value.strip()
	return resolved


#============================================
def build_request(
	config: RenderConfig,
	output_path: pathlib.Path,
	**values: str | None,
) -> CertificateRequest:
	"""
	Build a request with defaults applied.

	Args:
		config: Render configuration.
		output_path: Output PDF path.
		values: Field values keyed by field key.

	Returns:
		CertificateRequest.
	"""
	resolved = resolve_values(config, **values)
	return CertificateRequest(values=resolved, output_path=pathlib.Path(output_path))


#============================================
def new_canvas(
	output_path: pathlib.Path,
	geometry: PageGeometry,
	invariant: bool,
) -> reportlab.pdfgen.canvas.Canvas:
	"""
	Create a single page canvas of the configured size.

	Args:
		output_path: Output PDF path.
		geometry: Page geometry.
		invariant: Write deterministic PDF metadata.

	Returns:
		ReportLab canvas.
	"""
	return reportlab.pdfgen.canvas.Canvas(
		str(output_path),
		pagesize=(geometry.width, geometry.height),
		invariant=1 if invariant else 0,
	)


#============================================
def load_config_font(config: RenderConfig) -> str:
	"""
	Resolve and register the configured font.

	Args:
		config: Render configuration.

	Returns:
		Registered font name.
	"""
	stream = cc.resources.require(config.font_path, "Font")
	with stream:
		return cc.metrics.load_font(stream, INTERNAL_FONT_NAME)


#============================================
def save_canvas(pdf: reportlab.pdfgen.canvas.Canvas, output_path: pathlib.Path) -> None:
	"""
	Write the canvas, creating parent directories as needed.

	Args:
		pdf: ReportLab canvas.
		output_path: Output PDF path.
	"""
	try:
		output_path.parent.mkdir(parents=True, exist_ok=True)
		pdf.save()
	except OSError as err:
		raise OutputPathError(f"Cannot write {output_path}: {err}") from err


#============================================
def draw_template(
	pdf: reportlab.pdfgen.canvas.Canvas,
	config: RenderConfig,
) -> str:
	"""
	Draw the template stretched over the page, or a fallback border.

	Args:
		pdf: ReportLab canvas.
		config: Render configuration.

	Returns:
		BACKGROUND_TEMPLATE or BACKGROUND_BORDER.
	"""
	geometry = config.geometry
	stream = cc.resources.resolve(config.template_path)
	if stream is None:
		draw_fallback_border(pdf, geometry)
		return BACKGROUND_BORDER
	with stream:
		image = PIL.Image.open(stream)
		image.load()
	image_reader = reportlab.lib.utils.ImageReader(image)
	pdf.drawImage(
		image_reader,
		0,
		0,
		width=geometry.width,
		height=geometry.height,
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)
	return BACKGROUND_TEMPLATE


#============================================
def draw_fallback_border(pdf: reportlab.pdfgen.canvas.Canvas, geometry: PageGeometry) -> None:
	"""
	Draw a rectangular border inset from each page edge.

	Args:
		pdf: ReportLab canvas.
		geometry: Page geometry.
	"""
	inset = FALLBACK_BORDER_INSET
	pdf.setLineWidth(FALLBACK_BORDER_WIDTH)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	pdf.rect(
		inset,
		inset,
		geometry.width - 2.0 * inset,
		geometry.height - 2.0 * inset,
		stroke=1,
		fill=0,
	)


#============================================
def draw_field(
	pdf: reportlab.pdfgen.canvas.Canvas,
	font_name: str,
	field: FieldDefinition,
	value: str,
) -> FieldPlacement:
	"""
	Draw one text field at its anchor.

	Args:
		pdf: ReportLab canvas.
		font_name: Registered font name.
		field: Field definition.
		value: Field value.

	Returns:
		FieldPlacement describing what was drawn.
	"""
	anchor = field.anchor
	text = field.prefix + value
	text_x = cc.metrics.compute_text_x(text, font_name, anchor)
	pdf.setFont(font_name, anchor.size)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	pdf.drawString(text_x, anchor.y, text)
	return FieldPlacement(key=field.key, text=text, x=text_x, y=anchor.y, size=anchor.size)


#============================================
def render_certificate(request: CertificateRequest, config: RenderConfig) -> RenderedDocument:
	"""
	Render one certificate PDF.

	Args:
		request: Field values and output path.
		config: Render configuration.

	Returns:
		RenderedDocument.
	"""
	output_path = request.output_path
	pdf = new_canvas(output_path, config.geometry, config.invariant)
	font_name = load_config_font(config)
	background = draw_template(pdf, config)

	placements: list[FieldPlacement] = []
	for field in config.fields:
		value = request.values.get(field.key, "")
		placements.append(draw_field(pdf, font_name, field, value))

	pdf.showPage()
	save_canvas(pdf, output_path)
	print(f"Saved: {output_path.resolve()}")
	return RenderedDocument(
		output_path=output_path,
		background=background,
		placements=tuple(placements),
	)
