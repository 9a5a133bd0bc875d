"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import os
import pathlib
import sys

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

# PIP3 modules
import PIL.Image
import pytest
import reportlab

# local repo modules
import certificate_compositor.config


TEMPLATE_COLOR = (200, 30, 30)


#============================================
@pytest.fixture
def font_path() -> pathlib.Path:
	"""
	Path to the Vera TrueType font bundled with ReportLab.
	"""
	path = pathlib.Path(reportlab.__file__).parent / "fonts" / "Vera.ttf"
	assert path.exists()
	return path


#============================================
@pytest.fixture
def template_path(tmp_path: pathlib.Path) -> pathlib.Path:
	"""
	Solid color landscape PNG used as a certificate template.
	"""
	path = tmp_path / "template.png"
	image = PIL.Image.new("RGB", (842, 595), TEMPLATE_COLOR)
	image.save(path)
	return path


#============================================
@pytest.fixture
def config(
	font_path: pathlib.Path,
	template_path: pathlib.Path,
) -> certificate_compositor.config.RenderConfig:
	"""
	Default config pointing at the test font and template.
	"""
	return certificate_compositor.config.build_default_config(
		template_path=str(template_path),
		font_path=str(font_path),
		invariant=True,
	)


#============================================
@pytest.fixture
def borderless_config(
	config: certificate_compositor.config.RenderConfig,
	tmp_path: pathlib.Path,
) -> certificate_compositor.config.RenderConfig:
	"""
	Config whose template identifier matches nothing.
	"""
	missing = tmp_path / "missing" / "template.png"
	return certificate_compositor.config.with_resources(config, template_path=str(missing))
