"""
Resource lookup across packaged data and the filesystem.
"""

# Standard Library
import pathlib
import typing

# local repo modules
import certificate_compositor as cc
import certificate_compositor.errors


ResourceNotFoundError = cc.errors.ResourceNotFoundError

PACKAGE_ROOT = pathlib.Path(__file__).resolve().parent


#============================================
def split_identifier(identifier: str) -> list[str]:
	"""
	Split a resource identifier into path segments.

	Args:
		identifier: Identifier such as "/templates/certificate.png".

	Returns:
		Non-empty path segments.
	"""
	return [part for part in identifier.replace("\\", "/").split("/") if part]


class PackageResourceStrategy:
	"""
	Look up data files shipped beside the package modules.
	"""

	def __init__(self, root: pathlib.Path = PACKAGE_ROOT) -> None:
		self.root = pathlib.Path(root)

	def open(self, identifier: str) -> typing.BinaryIO | None:
		parts = split_identifier(identifier)
		if not parts or ".." in parts:
			return None
		candidate = self.root.joinpath(*parts)
		if not candidate.is_file():
			return None
		return candidate.open("rb")


class FilesystemStrategy:
	"""
	Read a relative or absolute filesystem path.
	"""

	def open(self, identifier: str) -> typing.BinaryIO | None:
		# a single leading separator is tolerated, "/fonts/x.ttf" means "fonts/x.ttf"
		path = pathlib.Path(identifier[1:] if identifier.startswith("/") else identifier)
		if not path.is_file():
			# absolute paths keep working when the stripped form is not found
			path = pathlib.Path(identifier)
			if not path.is_file():
				return None
		return path.open("rb")


RESOURCE_STRATEGIES = (PackageResourceStrategy(), FilesystemStrategy())
TABLE_SOURCE_STRATEGIES = (FilesystemStrategy(), PackageResourceStrategy())


#============================================
def resolve(
	identifier: str,
	strategies: typing.Sequence[typing.Any] | None = None,
) -> typing.BinaryIO | None:
	"""
	Open the first matching resource.

	Args:
		identifier: Resource path or identifier.
		strategies: Ordered lookup strategies, default packaged data then filesystem.

	Returns:
		Open binary stream the caller must close, or None if nothing matched.
	"""
	if strategies is None:
		strategies = RESOURCE_STRATEGIES
	if not identifier:
		return None
	for strategy in strategies:
		stream = strategy.open(identifier)
		if stream is not None:
			return stream
	return None


#============================================
def require(
	identifier: str,
	kind: str,
	strategies: typing.Sequence[typing.Any] | None = None,
) -> typing.BinaryIO:
	"""
	Open a resource that must exist.

	Args:
		identifier: Resource path or identifier.
		kind: Human readable kind used in the error message.
		strategies: Ordered lookup strategies.

	Returns:
		Open binary stream the caller must close.
	"""
	stream = resolve(identifier, strategies)
	if stream is None:
		raise ResourceNotFoundError(kind, identifier)
	return stream
