"""
schemawalk Core Module.

This module provides the console entry point of schemawalk, a batch JSON
Schema validator meant to run as a CI step over a workspace of data files.

The entry point:
1. Configures logging (stderr, optional rotating log file)
2. Loads configuration from defaults, schemawalk.yml and the environment,
   then applies command-line overrides
3. Compiles the forced schema, if one is configured (exit 1 on failure)
4. Walks the workspace, validating every .json/.geojson file
5. Prints one pass/fail line per file as it completes, with detail text
   for failures (indented JSON for schema violations)
6. Exits 0 when no file was invalid or errored, 1 otherwise

Functions:
    main(argv=None) -> int:
        Entry point for the console script.

Example:
    $ FAIL_FAST=true schemawalk --workspace data/
    data/a.json ✅
    data/b.json ❌
    Error detail: {
      ...
    }
"""
import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional, TextIO

from config import load_config
from schema.cache import SchemaCache
from schema.loader import SchemaLoader
from schema.resolver import SchemaResolver
from schemawalk.walker import OutcomeStatus, RunResult, ValidationOutcome, Walker
from validation.errors import ConfigurationError, SchemaLoadError

# Configure logging
logger = logging.getLogger(__name__)

PASS_MARK = "✅"
FAIL_MARK = "❌"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = False, log_file: str = "") -> None:
    """Configure the root logger for a command-line run.

    Log records go to stderr so they never interleave with the report on
    stdout. When log_file is set, records are also written to a rotating
    file (10MB, 3 backups).
    """
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates on repeated runs
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3
        )
        log_handler.setLevel(log_level)
        log_handler.setFormatter(formatter)
        root_logger.addHandler(log_handler)


class ConsoleReporter:
    """Prints the per-file report as outcomes arrive."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def _print(self, text: str) -> None:
        print(text, file=self.stream, flush=True)

    def __call__(self, path: str, outcome: ValidationOutcome) -> None:
        if outcome.status == OutcomeStatus.VALID:
            self._print(f"{path} {PASS_MARK}")
        elif outcome.status == OutcomeStatus.SKIPPED:
            self._print(f"{path} {PASS_MARK} (skipped: {outcome.error})")
        else:
            self._print(f"{path} {FAIL_MARK}")
            self._print(f"Error detail: {outcome.error.render()}")

    def summary(self, result: RunResult) -> None:
        if result.aborted:
            self._print("Validation failed fast, some JSON files were potentially skipped!")
        self._print(
            f"{len(result.outcomes)} file(s) checked: "
            f"{result.count(OutcomeStatus.VALID)} valid, "
            f"{result.count(OutcomeStatus.INVALID)} invalid, "
            f"{result.count(OutcomeStatus.SKIPPED)} skipped, "
            f"{result.count(OutcomeStatus.ERROR)} error(s)"
        )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="schemawalk",
        description="Validate every JSON/GeoJSON file in a directory tree against JSON Schema.",
    )
    parser.add_argument("--workspace", help="Directory to scan (default: $GITHUB_WORKSPACE or cwd)")
    parser.add_argument("--schema", help="Schema URI or path to force for every document")
    parser.add_argument("--fail-fast", action="store_true", default=None,
                        help="Stop at the first failing file")
    parser.add_argument("--require-schemas", action="store_true", default=None,
                        help="Treat a missing or empty $schema as an error")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load configuration and apply command-line overrides."""
    config = load_config(config_path=args.config)
    overrides = {
        "workspace": args.workspace,
        "force_schema_location": args.schema,
        "fail_fast": args.fail_fast,
        "require_schemas": args.require_schemas,
        "debug": args.debug,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    return config


def run(config: Dict[str, Any], reporter: Optional[ConsoleReporter] = None) -> int:
    """Validate the configured workspace and return the process exit status.

    Args:
        config: Configuration dictionary as returned by load_config
        reporter: Reporter for per-file output (default: stdout)

    Returns:
        0 if no document was invalid or errored, 1 otherwise
    """
    if reporter is None:
        reporter = ConsoleReporter()

    workspace = config["workspace"] or os.getcwd()
    if not os.path.isdir(workspace):
        print(f"Workspace directory not found: {workspace}", file=sys.stderr)
        return 1

    loader = SchemaLoader(timeout=config["request_timeout"])
    try:
        forced = None
        if config["force_schema_location"]:
            try:
                forced = loader.compile(config["force_schema_location"])
            except SchemaLoadError as e:
                print(f"Unable to compile provided schema: {e.message}", file=sys.stderr)
                return 1
            logger.info(f"Forcing schema {forced.uri} for every document")

        cache = SchemaCache(loader.compile)
        resolver = SchemaResolver(cache, forced=forced, require_declared=config["require_schemas"])
        walker = Walker(resolver, fail_fast=config["fail_fast"], on_outcome=reporter)

        logger.info(f"Scanning {workspace}")
        result = walker.run(workspace)
        logger.debug(f"Schema cache: {cache.misses} compiled, {cache.hits} hit(s)")
    finally:
        loader.close()

    reporter.summary(result)
    return 0 if result.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the schemawalk console command.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    args = parse_args(argv)
    # Default handler first so messages from loading the configuration are kept
    configure_logging()
    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e.message}")
        return 1

    configure_logging(debug=config["debug"], log_file=config["log_file"])
    if config["debug"]:
        logger.info("Debug mode enabled: verbose logging")

    return run(config)


# Allow running as a script for development/testing
if __name__ == "__main__":
    sys.exit(main())
