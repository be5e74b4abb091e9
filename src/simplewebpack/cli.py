"""
Command-line interface for simple-webpack.

This module provides the `simple-webpack` CLI tool for building JavaScript
bundles from a source directory with webpack.
"""

import argparse
import asyncio
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import simplewebpack
from simplewebpack.build import (
    AnalyzerOptions,
    BuildPipeline,
    ReadFilter,
    ReadMode,
    RunOptions,
    StatsAggregator,
    WebpackEngine,
    load_extension,
)
from simplewebpack.build.build_utils import ReportPrinter, format_duration
from simplewebpack.build.config_writer import render_config
from simplewebpack.build.extension import DEFAULT_EXTENSION_FILE
from simplewebpack.cli_utils import (
    ErrorFormatter,
    parse_list,
    parse_size_limits,
    setup_logging,
)
from simplewebpack.config import BuildMode, ProjectConfig, ProjectConfigError, RunSettings
from simplewebpack.deploy import deploy_default_configs
from simplewebpack.errors import ConfigError, SimpleWebpackError

PROG = "simple-webpack"


@dataclass
class BuildArgs:
    """Arguments for a build run."""

    source: str
    target: str
    stats: bool = False
    verbose: bool = False
    development: bool = False
    production: bool = False
    loose: bool = False
    bundle: bool = False
    name: Optional[str] = None
    modules: Optional[str] = None
    read_mode: Optional[str] = None
    include: Optional[str] = None
    exclude: Optional[str] = None
    public: Optional[str] = None
    devtool: Union[str, bool, None] = None
    no_minify: bool = False
    keep_names: bool = False
    analyze: Optional[str] = None
    colors: Optional[str] = None
    extend: Union[str, bool, None] = None
    engine: Optional[List[str]] = None
    show_config: bool = False
    config_values: Dict[str, str] = field(default_factory=dict)
    config_modules: List[str] = field(default_factory=list)
    config_colors: List[int] = field(default_factory=list)


def resolve_settings(args: BuildArgs, environ=None) -> RunSettings:
    """Build run settings from flags, simplewebpack.ini values and NODE_ENV.

    Explicit --production/--development flags win over the ini `mode`, which
    wins over NODE_ENV.
    """
    settings = RunSettings.from_environment(
        os.environ if environ is None else environ,
        strict=not args.loose,
        verbose=args.verbose,
    )
    if args.production:
        return settings.with_mode(BuildMode.PRODUCTION)
    if args.development:
        return settings.with_mode(BuildMode.DEVELOPMENT)

    mode = args.config_values.get("mode")
    if mode:
        try:
            return settings.with_mode(BuildMode(mode))
        except ValueError:
            raise ProjectConfigError(f"Invalid mode in {ProjectConfig.FILE_NAME}: {mode}")
    return settings


def resolve_run_options(args: BuildArgs, settings: RunSettings) -> RunOptions:
    """Translate CLI arguments into pipeline run options.

    Raises:
        SimpleWebpackError: For invalid filters, analyzer modes or extensions
    """
    values = args.config_values

    read_mode = ReadMode(args.read_mode or values.get("read") or ReadMode.NONE.value)

    include = args.include or values.get("include")
    exclude = args.exclude or values.get("exclude")
    read_filter = None
    if include or exclude:
        try:
            read_filter = ReadFilter.from_patterns(include=include, exclude=exclude)
        except re.error as e:
            raise ConfigError(f"Invalid read filter pattern: {e}", cause=e) from e

    name = None
    if args.bundle or values.get("bundle", "").lower() in ProjectConfig.TRUE_VALUES:
        name = args.name or values.get("name") or "bundle"

    prepend = tuple(parse_list(args.modules) or args.config_modules)

    devtool = args.devtool
    if devtool is True:
        devtool = "source-map" if settings.production else "eval-source-map"
    devtool = devtool or values.get("map") or None

    analyzer = None
    if args.analyze:
        analyzer = AnalyzerOptions(mode=args.analyze, generate_stats_file=args.stats)

    extend = args.extend or values.get("extend")
    extension = None
    if extend:
        if extend is True:
            extend = str(Path.cwd() / DEFAULT_EXTENSION_FILE)
        extension = load_extension(extend)

    return RunOptions(
        read_mode=read_mode,
        read_filter=read_filter,
        name=name,
        prepend=prepend,
        public_path=args.public or values.get("public") or None,
        extension=extension,
        devtool=devtool,
        minify=not args.no_minify,
        keep_names=args.keep_names,
        analyzer=analyzer,
    )


def show_config(pipeline: BuildPipeline, args: BuildArgs, options: RunOptions) -> None:
    """Print the generated setup and webpack config without compiling."""
    setup = asyncio.run(pipeline.generate_config(args.source, args.target, options))
    ErrorFormatter.print_success("simple-webpack configuration:")
    print(f"  source  {setup.source}")
    print(f"  target  {setup.target}")
    print(f"  options {setup.options}")
    print()
    print(render_config(setup.config))


def build_command(args: BuildArgs) -> None:
    """Build bundles from a source directory or file.

    Examples:
        simple-webpack src dist               # One bundle per source file
        simple-webpack src dist -b -n app     # Bundle all sources into app.js
        simple-webpack src dist --index       # Use index files as entries
        simple-webpack src dist -p -s         # Production build with stats
    """
    try:
        settings = resolve_settings(args)
        options = resolve_run_options(args, settings)

        if args.colors:
            limits = parse_size_limits(args.colors)
        else:
            limits = [kib * 1024 for kib in args.config_colors]
    except ValueError as e:
        ErrorFormatter.print_error("Invalid option", str(e))
        sys.exit(1)
    except SimpleWebpackError as e:
        ErrorFormatter.handle_build_error(e, args.verbose)
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)

    engine_command = args.engine
    pipeline = BuildPipeline(settings, engine=WebpackEngine(engine_command, work_dir=settings.project_root))

    if settings.strict and settings.verbose:
        ErrorFormatter.print_warning("Running in strict mode!")

    try:
        if args.show_config:
            show_config(pipeline, args, options)
            sys.exit(0)

        if settings.verbose:
            ErrorFormatter.print_info(f"Reading from: {Path(args.source).resolve()}")

        result = asyncio.run(pipeline.run(args.source, args.target, options))

    except SimpleWebpackError as e:
        ErrorFormatter.handle_build_error(e, settings.verbose)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, settings.verbose)

    payload = result.payload
    if payload is None:
        ErrorFormatter.print_error("simple-webpack build failed!")
        if settings.verbose:
            ErrorFormatter.print_info(f"Completed after {format_duration(result.elapsed)}")
        sys.exit(1)

    aggregator = StatsAggregator(settings, thresholds=limits or None)
    notices_shown = bool(aggregator.notices) and settings.verbose
    if notices_shown:
        for notice in aggregator.notices:
            ErrorFormatter.print_info(notice)

    info = payload.to_json({"all": False, "assets": True, "warnings": True})
    if payload.has_warnings() and (settings.verbose or settings.strict):
        ErrorFormatter.print_warning("Webpack warnings:")
        print(payload.warnings_text())
        if settings.verbose:
            ErrorFormatter.print_success("Output files:")

    if settings.verbose:
        for stat in aggregator.grade(aggregator.extract_assets(payload)):
            ErrorFormatter.print_info(ReportPrinter.format_asset(stat, extra_stats=args.stats))
        ErrorFormatter.print_info(f"Wrote to: {Path(args.target).resolve()}")

    count = len(info["assets"])
    message = f"simple-webpack wrote [ {count} ] file{'' if count == 1 else 's'}"
    if not settings.verbose:
        warnings = len(info["warnings"])
        message += f" with [{warnings}] warning{'' if warnings == 1 else 's'}"
    message += f" in {format_duration(result.elapsed)}"
    ErrorFormatter.print_success(message)

    if args.stats:
        report = aggregator.aggregate(payload, result.elapsed)
        if notices_shown:
            report.notices = []
        print()
        ReportPrinter.print_report(report, extra_stats=True)

    sys.exit(0)


def version_command() -> None:
    """Print the installed version and location."""
    install_dir = Path(simplewebpack.__file__).resolve().parent
    print(f"{PROG}@{simplewebpack.__version__}")
    ErrorFormatter.print_info(f"- Installed at: {install_dir}")
    sys.exit(0)


def defaults_command(target: str) -> None:
    """Deploy the default eslint and babel configs into the target directory."""
    for result in deploy_default_configs(target):
        if result.written:
            ErrorFormatter.print_success(result.message)
        else:
            ErrorFormatter.print_error(result.message)
    sys.exit(0)


def config_mode(parsed_args: argparse.Namespace, project_config: ProjectConfig) -> str:
    """Build mode used to select the mode-specific simplewebpack.ini section."""
    if parsed_args.production:
        return BuildMode.PRODUCTION.value
    if parsed_args.development:
        return BuildMode.DEVELOPMENT.value
    mode = project_config.get("mode")
    if mode:
        return mode
    return RunSettings.from_environment(os.environ).mode.value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="simple-webpack - build JavaScript bundles from a source directory",
    )
    parser.add_argument("source", nargs="?", default=None, help="Source file or directory")
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Output directory (with a single argument, the source is the current directory)",
    )
    parser.add_argument("-v", "--version", action="store_true", help="Show version and exit")
    parser.add_argument("-s", "--stats", action="store_true", help="Show build statistics")
    parser.add_argument("-i", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("-d", "--development", action="store_true", help="Force development mode")
    parser.add_argument("-p", "--production", action="store_true", help="Force production mode")
    parser.add_argument("-u", "--loose", action="store_true", help="Report compile errors without aborting")
    parser.add_argument("-b", "--bundle", action="store_true", help="Bundle all sources into one file")
    parser.add_argument("-n", "--name", default=None, help="Bundle name (default: bundle)")
    parser.add_argument("-m", "--modules", default=None, help="Comma separated modules to prepend to the bundle")

    read = parser.add_mutually_exclusive_group()
    read.add_argument(
        "--index", dest="read_mode", action="store_const", const=ReadMode.INDEX.value,
        help="Use index files as entries (recursive)",
    )
    read.add_argument(
        "--recursive", dest="read_mode", action="store_const", const=ReadMode.RECURSIVE.value,
        help="Read sources recursively, requires --include or --exclude",
    )
    parser.add_argument("--include", default=None, help="Regex source paths must match")
    parser.add_argument("--exclude", default=None, help="Regex source paths must not match")

    parser.add_argument("--public", default=None, help="webpack output.publicPath")
    parser.add_argument(
        "--map", dest="devtool", nargs="?", const=True, default=None,
        help="Generate source maps, optionally with a webpack devtool value",
    )
    parser.add_argument("--no-minify", action="store_true", help="Disable minification")
    parser.add_argument("--keep-names", action="store_true", help="Keep class and function names when minifying")
    parser.add_argument(
        "-a", "--analyze", nargs="?", const="static", default=None,
        help="Run the bundle analyzer (static, json or disabled)",
    )
    parser.add_argument("--colors", default=None, help="Three ascending KiB size limits, e.g. 200,400,500")
    parser.add_argument(
        "-e", "--extend", nargs="?", const=True, default=None,
        help=f"Extend the config with a file (default: ./{DEFAULT_EXTENSION_FILE})",
    )
    parser.add_argument("-y", "--show-config", action="store_true", help="Show the generated config and exit")
    parser.add_argument("--defaults", action="store_true", help="Deploy default eslint and babel configs")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """simple-webpack - directory-convention-driven webpack builds."""
    parser = build_parser()
    parsed_args = parser.parse_args(argv)

    # A single path argument is the target, read from the current directory
    source = parsed_args.source or ""
    target = parsed_args.target or ""
    if not target:
        target, source = source, ""

    if parsed_args.development and parsed_args.production:
        ErrorFormatter.print_error("Cannot force production and development mode at the same time")
        sys.exit(1)

    setup_logging(parsed_args.verbose)

    if parsed_args.version:
        version_command()

    try:
        project_config = ProjectConfig.find(Path.cwd())
        config_values: Dict[str, str] = {}
        engine = None
        config_verbose = config_loose = False
        config_modules: List[str] = []
        config_colors: List[int] = []
        if project_config:
            mode = config_mode(parsed_args, project_config)
            config_values = project_config.get_values(mode)
            engine = project_config.get_engine_command(mode)
            config_verbose = project_config.get_bool("verbose", mode=mode)
            config_loose = project_config.get_bool("loose", mode=mode)
            config_modules = project_config.get_list("modules", mode=mode)
            config_colors = project_config.get_colors(mode=mode)
    except SimpleWebpackError as e:
        ErrorFormatter.handle_build_error(e, parsed_args.verbose)
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, parsed_args.verbose)

    if parsed_args.defaults:
        defaults_command(target)

    build_args = BuildArgs(
        source=source,
        target=target,
        stats=parsed_args.stats,
        verbose=parsed_args.verbose or config_verbose,
        development=parsed_args.development,
        production=parsed_args.production,
        loose=parsed_args.loose or config_loose,
        bundle=parsed_args.bundle,
        name=parsed_args.name,
        modules=parsed_args.modules,
        read_mode=parsed_args.read_mode,
        include=parsed_args.include,
        exclude=parsed_args.exclude,
        public=parsed_args.public,
        devtool=parsed_args.devtool,
        no_minify=parsed_args.no_minify,
        keep_names=parsed_args.keep_names,
        analyze=parsed_args.analyze,
        colors=parsed_args.colors,
        extend=parsed_args.extend,
        engine=engine,
        show_config=parsed_args.show_config,
        config_values=config_values,
        config_modules=config_modules,
        config_colors=config_colors,
    )
    build_command(build_args)


if __name__ == "__main__":
    main()
