import io
import pathlib

import pytest

import certificate_compositor.errors
import certificate_compositor.resources


#============================================
def test_missing_resource_returns_none(tmp_path: pathlib.Path) -> None:
	"""
	Identifiers matching nothing resolve to None without raising.
	"""
	assert certificate_compositor.resources.resolve("/no/such/resource.png") is None
	assert certificate_compositor.resources.resolve(str(tmp_path / "absent.ttf")) is None
	assert certificate_compositor.resources.resolve("") is None
	assert certificate_compositor.resources.resolve("/../../etc/passwd-not-here") is None


#============================================
def test_leading_separator_is_tolerated(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
	"""
	A single leading separator falls back to a relative filesystem path.
	"""
	monkeypatch.chdir(tmp_path)
	fonts_dir = tmp_path / "fonts"
	fonts_dir.mkdir()
	(fonts_dir / "Custom.ttf").write_bytes(b"font-bytes")
	stream = certificate_compositor.resources.resolve("/fonts/Custom.ttf")
	assert stream is not None
	with stream:
		assert stream.read() == b"font-bytes"


#============================================
def test_absolute_path(tmp_path: pathlib.Path) -> None:
	"""
	Absolute paths resolve through the filesystem strategy.
	"""
	path = tmp_path / "template.png"
	path.write_bytes(b"png")
	stream = certificate_compositor.resources.resolve(str(path))
	assert stream is not None
	with stream:
		assert stream.read() == b"png"


#============================================
def test_packaged_resource_found_first(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
	"""
	Packaged data wins over a filesystem file at the same relative path.
	"""
	monkeypatch.chdir(tmp_path)
	data_dir = tmp_path / "data"
	data_dir.mkdir()
	(data_dir / "sample_recipients.csv").write_text("shadow", encoding="utf-8")
	stream = certificate_compositor.resources.resolve("/data/sample_recipients.csv")
	assert stream is not None
	with stream:
		header = stream.readline().decode("utf-8").strip()
	assert header == "name,course,date,certId"


#============================================
def test_strategy_order_is_configurable(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
	"""
	Table sources try the filesystem before packaged data.
	"""
	monkeypatch.chdir(tmp_path)
	data_dir = tmp_path / "data"
	data_dir.mkdir()
	(data_dir / "sample_recipients.csv").write_text("shadow\n", encoding="utf-8")
	stream = certificate_compositor.resources.resolve(
		"data/sample_recipients.csv",
		certificate_compositor.resources.TABLE_SOURCE_STRATEGIES,
	)
	assert stream is not None
	with stream:
		assert stream.read() == b"shadow\n"


#============================================
def test_custom_strategy_list() -> None:
	"""
	Any object with an open() method can serve as a strategy.
	"""
	class MemoryStrategy:
		def open(self, identifier: str):
			if identifier == "/memory/item":
				return io.BytesIO(b"in-memory")
			return None

	strategies = (MemoryStrategy(), certificate_compositor.resources.FilesystemStrategy())
	stream = certificate_compositor.resources.resolve("/memory/item", strategies)
	assert stream is not None
	with stream:
		assert stream.read() == b"in-memory"
	assert certificate_compositor.resources.resolve("/memory/other", strategies) is None


#============================================
def test_require_raises_resource_not_found() -> None:
	"""
	require() turns absence into ResourceNotFoundError.
	"""
	with pytest.raises(certificate_compositor.errors.ResourceNotFoundError) as excinfo:
		certificate_compositor.resources.require("/fonts/Missing.ttf", "Font")
	assert excinfo.value.kind == "Font"
	assert excinfo.value.identifier == "/fonts/Missing.ttf"
	assert "Font not found" in str(excinfo.value)


#============================================
def test_default_strategies_anchor_on_package_directory() -> None:
	"""
	Packaged lookups read from the directory holding the package modules.
	"""
	package_root = pathlib.Path(certificate_compositor.resources.__file__).resolve().parent
	strategy = certificate_compositor.resources.RESOURCE_STRATEGIES[0]
	assert isinstance(strategy, certificate_compositor.resources.PackageResourceStrategy)
	assert strategy.root == package_root
	assert (package_root / "data" / "sample_recipients.csv").is_file()
	assert strategy.open("/fonts/Missing.ttf") is None
	assert certificate_compositor.resources.resolve("/fonts/Missing.ttf") is None
	with pytest.raises(certificate_compositor.errors.ResourceNotFoundError):
		certificate_compositor.resources.require("/fonts/Missing.ttf", "Font")


#============================================
def test_package_strategy_custom_root(tmp_path: pathlib.Path) -> None:
	"""
	A package strategy rooted elsewhere reads nested files and refuses parent segments.
	"""
	(tmp_path / "templates").mkdir()
	(tmp_path / "templates" / "blank.png").write_bytes(b"png")
	strategy = certificate_compositor.resources.PackageResourceStrategy(tmp_path)
	stream = strategy.open("/templates/blank.png")
	assert stream is not None
	with stream:
		assert stream.read() == b"png"
	assert strategy.open("/templates") is None
	assert strategy.open("/templates/../templates/blank.png") is None
