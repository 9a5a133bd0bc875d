"""
CLI entry points for certificate generation.
"""

# Standard Library
import argparse
import pathlib
import sys
import time

# local repo modules
import certificate_compositor as cc
import certificate_compositor.batch
import certificate_compositor.calibration
import certificate_compositor.compositor
import certificate_compositor.config
import certificate_compositor.errors


RenderConfig = cc.config.RenderConfig
RowPolicy = cc.batch.RowPolicy
CertificateError = cc.errors.CertificateError

DEFAULT_OUT_DIR = cc.config.DEFAULT_OUT_DIR
DEFAULT_TEMPLATE_PATH = cc.config.DEFAULT_TEMPLATE_PATH
DEFAULT_FONT_PATH = cc.config.DEFAULT_FONT_PATH
CALIBRATION_FILENAME = cc.config.CALIBRATION_FILENAME


#============================================
def build_config(args: argparse.Namespace) -> RenderConfig:
	"""
	Build the render config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderConfig.
	"""
	config = cc.config.build_default_config(
		template_path=args.template_path,
		font_path=args.font_path,
		invariant=args.invariant,
	)
	if args.anchors_path:
		overrides = cc.config.load_anchor_overrides(pathlib.Path(args.anchors_path))
		config = cc.config.apply_anchor_overrides(config, overrides)
	return config


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, default sys.argv[1:].

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Render certificate PDFs over a template image.")

	mode_group = parser.add_argument_group("Mode")
	mode_group.add_argument("-c", "--calibrate", dest="calibrate", action="store_true", help="Write calibrate.pdf with a grid and anchor markers.")
	mode_group.add_argument("-s", "--csv", dest="csv_source", default=None, help="Bulk generate from a CSV with headers name,course,date,certId.")

	field_group = parser.add_argument_group("Single certificate")
	field_group.add_argument("--name", dest="name", default=None, help="Recipient name (default: Student Name).")
	field_group.add_argument("--course", dest="course", default=None, help="Course title (default: Course Title).")
	field_group.add_argument("--date", dest="date", default=None, help="Date text (default: today).")
	field_group.add_argument("--id", dest="cert_id", default=None, help="Certificate ID (default: random UUID).")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--out-dir", dest="out_dir", default=DEFAULT_OUT_DIR, help="Output folder.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Batch manifest JSON path.")

	resource_group = parser.add_argument_group("Resources")
	resource_group.add_argument("-t", "--template", dest="template_path", default=DEFAULT_TEMPLATE_PATH, help="Template image path or packaged resource.")
	resource_group.add_argument("-f", "--font", dest="font_path", default=DEFAULT_FONT_PATH, help="TTF/OTF font path or packaged resource. Required, no font is bundled.")
	resource_group.add_argument("-a", "--anchors", dest="anchors_path", default=None, help="JSON file with anchor overrides.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-r", "--strict-rows", dest="strict_rows", action="store_true", help="Fail on blank or missing CSV cells.")
	behavior_group.add_argument("-R", "--default-rows", dest="strict_rows", action="store_false", help="Fill blank or missing CSV cells with defaults.")
	behavior_group.add_argument("-i", "--invariant", dest="invariant", action="store_true", help="Write deterministic PDF metadata.")

	parser.set_defaults(
		calibrate=False,
		strict_rows=False,
		invariant=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def run_calibration(config: RenderConfig, out_dir: pathlib.Path) -> pathlib.Path:
	"""
	Write the calibration sheet.

	Args:
		config: Render configuration.
		out_dir: Output directory.

	Returns:
		Calibration sheet path.
	"""
	sheet = cc.calibration.render_calibration_sheet(config, out_dir / CALIBRATION_FILENAME)
	for marker in sheet.markers:
		print(f"  {marker.text}")
	return sheet.output_path


#============================================
def run_single(args: argparse.Namespace, config: RenderConfig, out_dir: pathlib.Path) -> pathlib.Path:
	"""
	Render one certificate from CLI field values.

	Args:
		args: Parsed argparse namespace.
		config: Render configuration.
		out_dir: Output directory.

	Returns:
		Certificate path.
	"""
	values = {
		"name": args.name,
		"course": args.course,
		"date": args.date,
		"certId": args.cert_id,
	}
	resolved = cc.compositor.resolve_values(config, **values)
	output_path = out_dir / cc.batch.certificate_filename(resolved["name"])
	request = cc.compositor.CertificateRequest(values=resolved, output_path=output_path)
	document = cc.compositor.render_certificate(request, config)
	print(f"Background: {document.background}")
	return document.output_path


#============================================
def run_batch(args: argparse.Namespace, config: RenderConfig, out_dir: pathlib.Path) -> None:
	"""
	Render one certificate per CSV row.

	Args:
		args: Parsed argparse namespace.
		config: Render configuration.
		out_dir: Output directory.
	"""
	policy = RowPolicy.STRICT if args.strict_rows else RowPolicy.DEFAULT
	print(f"CSV source: {args.csv_source}")
	print(f"Row policy: {policy.value}")
	result = cc.batch.run_batch(args.csv_source, out_dir, config, policy)
	print(f"Certificates written: {len(result.rendered)}")
	print(f"Defaults applied: {result.defaults_applied}")
	if result.skipped_blank_rows:
		print(f"Blank rows skipped: {result.skipped_blank_rows}")
	if args.manifest_path:
		manifest_path = pathlib.Path(args.manifest_path)
		cc.batch.write_batch_manifest(manifest_path, result, config)
		print(f"Manifest written: {manifest_path}")
	print("Bulk generation complete.")


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Dispatch to calibration, batch or single certificate mode.

	Args:
		args: Parsed argparse namespace.
	"""
	config = build_config(args)
	out_dir = pathlib.Path(args.out_dir)
	print(f"Template: {config.template_path}")
	print(f"Font: {config.font_path}")
	print(f"Output folder: {out_dir}")

	start_time = time.perf_counter()
	if args.calibrate:
		run_calibration(config, out_dir)
	elif args.csv_source:
		run_batch(args, config, out_dir)
	else:
		run_single(args, config, out_dir)
	total_time = time.perf_counter() - start_time
	print(f"Timing: total={total_time:.2f}s")


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.

	Args:
		argv: Argument list, default sys.argv[1:].
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except (CertificateError, OSError) as err:
		print(f"ERROR: {err}", file=sys.stderr)
		sys.exit(1)
