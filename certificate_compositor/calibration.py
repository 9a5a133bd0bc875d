"""
Calibration sheet: coordinate grid plus anchor markers.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import reportlab.pdfgen.canvas

# local repo modules
import certificate_compositor as cc
import certificate_compositor.compositor
import certificate_compositor.config


RenderConfig = cc.config.RenderConfig
PageGeometry = cc.config.PageGeometry
FieldDefinition = cc.config.FieldDefinition

GRID_STEP = cc.config.GRID_STEP
GRID_LINE_WIDTH = cc.config.GRID_LINE_WIDTH
MARKER_HALF_SIZE = cc.config.MARKER_HALF_SIZE
MARKER_LINE_WIDTH = cc.config.MARKER_LINE_WIDTH
MARKER_LABEL_OFFSET = cc.config.MARKER_LABEL_OFFSET
MARKER_LABEL_SIZE = cc.config.MARKER_LABEL_SIZE


@dataclasses.dataclass(frozen=True)
class CalibrationMarker:
	label: str
	x: float
	y: float
	text: str


@dataclasses.dataclass
class CalibrationSheet:
	output_path: pathlib.Path
	markers: tuple[CalibrationMarker, ...]
	grid_lines: int


#============================================
def grid_positions(limit: float, step: float) -> list[float]:
	"""
	List grid line positions from 0 to limit inclusive.

	Args:
		limit: Page extent.
		step: Grid spacing.

	Returns:
		Positions in points.
	"""
	positions: list[float] = []
	index = 0
	while index * step <= limit:
		positions.append(index * step)
		index += 1
	return positions


#============================================
def draw_grid(pdf: reportlab.pdfgen.canvas.Canvas, geometry: PageGeometry) -> int:
	"""
	Draw a light grid every GRID_STEP points.

	Args:
		pdf: ReportLab canvas.
		geometry: Page geometry.

	Returns:
		Number of grid lines drawn.
	"""
	pdf.setLineWidth(GRID_LINE_WIDTH)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	lines: list[tuple[float, float, float, float]] = []
	for x in grid_positions(geometry.width, GRID_STEP):
		lines.append((x, 0.0, x, geometry.height))
	for y in grid_positions(geometry.height, GRID_STEP):
		lines.append((0.0, y, geometry.width, y))
	pdf.lines(lines)
	return len(lines)


#============================================
def format_marker_label(field: FieldDefinition, show_coordinates: bool) -> str:
	"""
	Format the label printed beside an anchor marker.

	Args:
		field: Field definition.
		show_coordinates: Append the integer coordinate pair.

	Returns:
		Label text, e.g. "NAME @ (420,250)".
	"""
	if not show_coordinates:
		return field.label
	return f"{field.label} @ ({int(field.anchor.x)},{int(field.anchor.y)})"


#============================================
def draw_marker(
	pdf: reportlab.pdfgen.canvas.Canvas,
	font_name: str,
	field: FieldDefinition,
	show_coordinates: bool,
) -> CalibrationMarker:
	"""
	Draw an X crosshair and label at a field anchor.

	Args:
		pdf: ReportLab canvas.
		font_name: Registered font name.
		field: Field definition.
		show_coordinates: Include the coordinates in the label.

	Returns:
		CalibrationMarker.
	"""
	x = field.anchor.x
	y = field.anchor.y
	size = MARKER_HALF_SIZE
	pdf.setLineWidth(MARKER_LINE_WIDTH)
	pdf.line(x - size, y - size, x + size, y + size)
	pdf.line(x - size, y + size, x + size, y - size)

	text = format_marker_label(field, show_coordinates)
	pdf.setFont(font_name, MARKER_LABEL_SIZE)
	pdf.drawString(x + MARKER_LABEL_OFFSET, y + MARKER_LABEL_OFFSET, text)
	return CalibrationMarker(label=field.label, x=x, y=y, text=text)


#============================================
def render_calibration_sheet(
	config: RenderConfig,
	output_path: pathlib.Path,
	show_coordinates: bool = True,
) -> CalibrationSheet:
	"""
	Render a grid with one marker per configured anchor.

	The template image is never drawn on this sheet.

	Args:
		config: Render configuration.
		output_path: Output PDF path.
		show_coordinates: Print the anchor coordinates beside each label.

	Returns:
		CalibrationSheet.
	"""
	output_path = pathlib.Path(output_path)
	pdf = cc.compositor.new_canvas(output_path, config.geometry, config.invariant)
	font_name = cc.compositor.load_config_font(config)

	grid_lines = draw_grid(pdf, config.geometry)
	markers = tuple(
		draw_marker(pdf, font_name, field, show_coordinates)
		for field in config.fields
	)

	pdf.showPage()
	cc.compositor.save_canvas(pdf, output_path)
	print(f"Calibration sheet written to {output_path.resolve()}")
	return CalibrationSheet(output_path=output_path, markers=markers, grid_lines=grid_lines)
