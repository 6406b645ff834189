"""
Command-line entrypoint.

    yamlrun run test.yml
    yamlrun run ./scenarios/ other.yaml --browser firefox --no-headless
    yamlrun version

``run`` accepts files and directories (searched recursively for
``.yml``/``.yaml``). Each file gets its own browser session. A failing
file stops the directory it belongs to; the remaining command-line paths
still run, and the exit code is non-zero if anything failed.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from yamlrun.core.config import BrowserKind, RunConfig, settings
from yamlrun.core.errors import PathProcessingError, YamlRunError
from yamlrun.runner.engine import Engine
from yamlrun.runner.install_recovery import InstallRecovery, install_browsers
from yamlrun.runner.scenario import load_scenario

logger = logging.getLogger(__name__)

SCENARIO_EXTENSIONS = (".yml", ".yaml")

EngineFactory = Callable[..., Engine]


def get_version() -> str:
    try:
        return version("yamlrun")
    except PackageNotFoundError:
        return "dev"


def iter_scenario_files(dir_path: str) -> Iterator[str]:
    """
    Yield scenario files under ``dir_path`` depth-first.

    Entries of each directory are visited in lexical order with files and
    subdirectories interleaved, so ``a_sub/x.yml`` comes before ``b.yml``.
    Symlinked directories are not followed.
    """
    for name in sorted(os.listdir(dir_path)):
        path = os.path.join(dir_path, name)
        if os.path.isdir(path) and not os.path.islink(path):
            yield from iter_scenario_files(path)
        elif os.path.splitext(name)[1] in SCENARIO_EXTENSIONS:
            yield path


class ScenarioRunner:
    """Runs scenario files one at a time, each with a fresh engine."""

    def __init__(
        self,
        config: RunConfig,
        *,
        auto_install: bool = True,
        output_dir: str | None = None,
        engine_factory: EngineFactory = Engine,
        prompt: Callable[[str], str] = input,
        installer: Callable[[str], None] = install_browsers,
    ) -> None:
        self.config = config
        self.auto_install = auto_install
        self.output_dir = output_dir or None
        self._engine_factory = engine_factory
        self._prompt = prompt
        self._installer = installer
        self._report_names: set[str] = set()

    def process_path(self, path: str) -> None:
        if os.path.isdir(path):
            self.process_directory(path)
        elif os.path.exists(path):
            self.process_file(path)
        else:
            raise PathProcessingError(path, FileNotFoundError(f"path does not exist: {path}"))

    def process_directory(self, dir_path: str) -> None:
        logger.info("Processing directory: %s", dir_path)
        try:
            for file_path in iter_scenario_files(dir_path):
                self.process_file(file_path)
        except OSError as e:
            raise PathProcessingError(dir_path, e) from e

    def process_file(self, file_path: str) -> None:
        try:
            self._run_file(file_path)
        except YamlRunError as e:
            raise PathProcessingError(file_path, e) from e

    def _run_file(self, file_path: str) -> None:
        logger.info("Processing file: %s", file_path)
        scenario = load_scenario(file_path)
        logger.info("Parsed scenario: %s with %d steps", scenario.description, len(scenario.steps))

        run_dir: Optional[Path] = None
        if self.output_dir:
            from yamlrun.reporting.run_report import report_dir_for

            run_dir = report_dir_for(self.output_dir, file_path, self._report_names)
            self._report_names.add(run_dir.name)

        recovery = InstallRecovery(self.auto_install, prompt=self._prompt, installer=self._installer)
        engine = recovery.open_engine(
            lambda: self._engine_factory(self.config, artifacts_dir=str(run_dir) if run_dir else None)
        )

        error: YamlRunError | None = None
        try:
            with engine:
                engine.execute(scenario)
        except YamlRunError as e:
            error = e
            raise
        finally:
            if run_dir is not None:
                self._write_report(run_dir, file_path, scenario, engine, error)

        print(f"✓ Successfully executed: {file_path}")

    def _write_report(self, run_dir, file_path, scenario, engine, error) -> None:
        from yamlrun.reporting.run_report import write_run_report

        try:
            paths = write_run_report(run_dir, file_path, scenario, engine.step_log, error)
            logger.info("Report written: %s", paths["report"])
        except Exception as e:
            logger.warning("could not write report for %s: %s", file_path, e)


def _positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError("must be a positive number of milliseconds")
    return n


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="yamlrun",
        description="Run Playwright browser tests described in YAML files.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("version", help="Show version information")

    run = sub.add_parser(
        "run",
        help="Run test scenarios",
        description="Run test scenarios from YAML files or directories of YAML files.",
    )
    run.add_argument("paths", nargs="+", metavar="PATH", help="Scenario file or directory")
    run.add_argument(
        "-b",
        "--browser",
        choices=[b.value for b in BrowserKind],
        default=settings.BROWSER.value,
        help="Browser to use (default: %(default)s)",
    )
    run.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=settings.HEADLESS,
        help="Run the browser without a window",
    )
    run.add_argument(
        "--timeout",
        type=_positive_int,
        default=settings.TIMEOUT_MS,
        help="Timeout for browser operations in milliseconds (default: %(default)s)",
    )
    run.add_argument("-o", "--output", default=settings.OUTPUT_DIR, help="Output directory for reports")
    run.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    run.add_argument("--debug", action="store_true", help="Debug logging")
    run.add_argument(
        "--auto-install",
        action=argparse.BooleanOptionalAction,
        default=settings.AUTO_INSTALL,
        help="Offer to install a missing browser (disable in CI with --no-auto-install)",
    )
    return ap


def configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def run_command(args: argparse.Namespace, **runner_kwargs) -> int:
    config = RunConfig(browser=BrowserKind(args.browser), headless=args.headless, timeout_ms=args.timeout)
    logger.info(
        "Configuration: Browser=%s, Headless=%s, Timeout=%d",
        config.browser.value,
        config.headless,
        config.timeout_ms,
    )
    runner = ScenarioRunner(
        config,
        auto_install=args.auto_install,
        output_dir=args.output,
        **runner_kwargs,
    )

    failed = 0
    for path in args.paths:
        try:
            runner.process_path(path)
        except YamlRunError as e:
            failed += 1
            print(f"Error: {e}", file=sys.stderr)
    return 1 if failed else 0


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "version":
        print(f"yamlrun version {get_version()}")
        return 0
    configure_logging(args.verbose, args.debug)
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
