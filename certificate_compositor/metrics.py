"""
Font loading and advance-width metrics for text centering.
"""

# Standard Library
import typing

# PIP3 modules
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts

# local repo modules
import certificate_compositor as cc
import certificate_compositor.config
import certificate_compositor.errors


FieldAnchor = cc.config.FieldAnchor
FontLoadError = cc.errors.FontLoadError

FONT_UNITS_PER_EM = cc.config.FONT_UNITS_PER_EM


#============================================
def load_font(stream: typing.BinaryIO, font_name: str) -> str:
	"""
	Register a TrueType font read from a stream.

	ReportLab embeds the glyphs each document actually uses, so any
	code point covered by the font can be drawn.

	Args:
		stream: Open binary stream of a TTF/OTF file.
		font_name: Name to register the font under.

	Returns:
		Registered font name.
	"""
	try:
		font = reportlab.pdfbase.ttfonts.TTFont(font_name, stream)
	except reportlab.pdfbase.ttfonts.TTFError as err:
		raise FontLoadError(f"Unusable font: {err}") from err
	reportlab.pdfbase.pdfmetrics.registerFont(font)
	return font_name


#============================================
def advance_width(text: str, font_name: str, size: float) -> float:
	"""
	Compute the horizontal advance of a string.

	Glyph advances are summed in the 1000 units per em glyph space
	and scaled by size / 1000.

	Args:
		text: Text to measure.
		font_name: Registered font name.
		size: Font size in points.

	Returns:
		Advance width in points.
	"""
	font = reportlab.pdfbase.pdfmetrics.getFont(font_name)
	glyph_units = font.stringWidth(text, FONT_UNITS_PER_EM)
	return glyph_units * size / FONT_UNITS_PER_EM


#============================================
def compute_text_x(text: str, font_name: str, anchor: FieldAnchor) -> float:
	"""
	Compute the left edge for a field's text run.

	Args:
		text: Text to draw.
		font_name: Registered font name.
		anchor: Field anchor.

	Returns:
		X position in points.
	"""
	if not anchor.centered:
		return anchor.x
	return anchor.x - advance_width(text, font_name, anchor.size) / 2.0
