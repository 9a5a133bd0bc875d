import json
import pathlib

import pytest
import reportlab.lib.pagesizes

import certificate_compositor.config
import certificate_compositor.errors


#============================================
def test_page_geometry_is_a4_landscape() -> None:
	"""
	Page axes are the portrait A4 axes swapped.
	"""
	geometry = certificate_compositor.config.PAGE_GEOMETRY
	portrait_width, portrait_height = reportlab.lib.pagesizes.A4
	assert geometry.width == portrait_height
	assert geometry.height == portrait_width
	assert geometry.width > geometry.height > 0.0
	assert geometry.center_x == pytest.approx(geometry.width / 2.0)


#============================================
def test_default_field_table_order_and_flags() -> None:
	"""
	Fields are declared in draw order with overridable centering flags.
	"""
	config = certificate_compositor.config.build_default_config()
	keys = [field.key for field in config.fields]
	assert keys == ["name", "course", "date", "certId"]
	centered = {field.key: field.anchor.centered for field in config.fields}
	assert centered == {"name": True, "course": True, "date": False, "certId": False}
	columns = [field.column for field in config.fields]
	assert columns == ["name", "course", "date", "certid"]
	name = certificate_compositor.config.find_field(config, "NAME")
	assert name.anchor.x == pytest.approx(config.geometry.center_x)


#============================================
def test_default_policies() -> None:
	"""
	Defaults are placeholders, today's date and a unique token.
	"""
	config = certificate_compositor.config.build_default_config()
	defaults = {field.key: field for field in config.fields}
	assert defaults["name"].default_value() == "Student Name"
	assert defaults["course"].default_value() == "Course Title"
	assert defaults["date"].default_value() == certificate_compositor.config.today_iso()
	first = defaults["certId"].default_value()
	second = defaults["certId"].default_value()
	assert first and second and first != second


#============================================
def test_with_anchor_returns_new_config() -> None:
	"""
	Anchor setters copy the config instead of mutating it.
	"""
	config = certificate_compositor.config.build_default_config()
	moved = certificate_compositor.config.with_anchor(config, "date", x=300, centered=True)
	date = certificate_compositor.config.find_field(moved, "date")
	assert date.anchor.x == 300.0
	assert date.anchor.y == 100.0
	assert date.anchor.centered is True
	original = certificate_compositor.config.find_field(config, "date")
	assert original.anchor.x == 250.0
	assert original.anchor.centered is False


#============================================
def test_with_anchor_unknown_field() -> None:
	"""
	Unknown field keys are rejected.
	"""
	config = certificate_compositor.config.build_default_config()
	with pytest.raises(certificate_compositor.errors.ConfigError):
		certificate_compositor.config.with_anchor(config, "signature", x=1.0)


#============================================
def test_anchor_overrides_from_file(tmp_path: pathlib.Path) -> None:
	"""
	JSON overrides move anchors and accept out-of-page values.
	"""
	path = tmp_path / "anchors.json"
	path.write_text(json.dumps({"name": {"y": 262, "size": 40}, "certId": {"x": -10}}), encoding="utf-8")
	overrides = certificate_compositor.config.load_anchor_overrides(path)
	config = certificate_compositor.config.build_default_config()
	config = certificate_compositor.config.apply_anchor_overrides(config, overrides)
	name = certificate_compositor.config.find_field(config, "name")
	assert (name.anchor.y, name.anchor.size) == (262.0, 40.0)
	cert_id = certificate_compositor.config.find_field(config, "certId")
	assert cert_id.anchor.x == -10.0


#============================================
def test_anchor_overrides_rejects_bad_input(tmp_path: pathlib.Path) -> None:
	"""
	Malformed files and unknown attributes raise ConfigError.
	"""
	config = certificate_compositor.config.build_default_config()
	with pytest.raises(certificate_compositor.errors.ConfigError):
		certificate_compositor.config.apply_anchor_overrides(config, {"name": {"colour": "red"}})
	with pytest.raises(certificate_compositor.errors.ConfigError):
		certificate_compositor.config.apply_anchor_overrides(config, {"name": {"x": "left"}})

	path = tmp_path / "anchors.json"
	path.write_text("[1, 2]", encoding="utf-8")
	with pytest.raises(certificate_compositor.errors.ConfigError):
		certificate_compositor.config.load_anchor_overrides(path)
	path.write_text("{not json", encoding="utf-8")
	with pytest.raises(certificate_compositor.errors.ConfigError):
		certificate_compositor.config.load_anchor_overrides(path)
