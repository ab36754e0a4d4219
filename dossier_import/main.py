"""Command-line entry point for the dossier import pipeline."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from dossier_import.config.environment import EnvironmentConfig
from dossier_import.config.exceptions import ConfigurationError
from dossier_import.config.loader import load_config
from dossier_import.config.models import ImportConfig
from dossier_import.exceptions import DossierImportError
from dossier_import.logging import get_logger
from dossier_import.logging.config import configure_logging
from dossier_import.normalization.service import DossierNormalizer
from dossier_import.persistence import PersistenceError, SqlDossierStore, close_database, init_database
from dossier_import.pipeline import ImportPipeline
from dossier_import.reporting import ReportError, ReportRenderer
from dossier_import.validation.models import ValidationContext
from dossier_import.validation.service import DossierValidator

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_UNPARSEABLE = 2


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[ImportConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    else:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_pipeline(
    app_config: ImportConfig, strict_mode: bool, store: Optional[SqlDossierStore] = None
) -> ImportPipeline:
    """Wire the normalizer, validator and optional store from configuration."""
    normalizer = DossierNormalizer(
        default_ai_model=app_config.normalization.default_ai_model,
        default_validation_level=app_config.normalization.default_validation_level,
    )
    validator = DossierValidator(strict_mode=strict_mode)
    return ImportPipeline(
        normalizer=normalizer,
        validator=validator,
        persister=store,
        run_log=store,
        cache_size=app_config.pipeline.cache_size,
    )


def read_input(source: str) -> str:
    """Read raw import text from a file path, or from stdin when source is '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dossier-import",
        description="Dossier import - sanitize, normalize, validate and commit territory dossiers",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default="text",
        choices=["text", "json"],
        help="Report format printed on stdout (default: text)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Require minimum domain, source and fable counts",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Validate a dossier without storing it")
    preview.add_argument("file", help="Dossier file, or '-' for stdin")
    preview.add_argument("--exploration-id", default=None, help="Target exploration (enables contextual checks)")
    preview.add_argument("--marche-id", default=None, help="Target marche (enables contextual checks)")

    commit = subparsers.add_parser("commit", help="Validate a dossier and store it if valid")
    commit.add_argument("file", help="Dossier file, or '-' for stdin")
    commit.add_argument("--exploration-id", required=True, help="Target exploration")
    commit.add_argument("--marche-id", required=True, help="Target marche")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the dossier import CLI.

    Returns:
        0 when the preview is valid or the commit succeeded, 1 when the
        dossier is invalid, the commit is refused or fails, the report cannot
        be rendered, or the configuration is invalid, 2 when the input cannot
        be parsed.
    """
    args = build_parser().parse_args(argv)
    database_ready = False

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        strict_mode = args.strict or app_config.validation.strict_mode
        logger.info(
            "Dossier import starting",
            extra={
                "event": "cli.starting",
                "command": args.command,
                "source": args.file,
                "strict_mode": strict_mode,
                "persistence_enabled": app_config.persistence.enabled,
            },
        )

        store = None
        if app_config.persistence.enabled:
            init_database(env_config.database_url, app_config.persistence)
            database_ready = True
            store = SqlDossierStore(record_runs=app_config.persistence.record_runs)

        pipeline = build_pipeline(app_config, strict_mode, store)
        raw = read_input(args.file)
        renderer = ReportRenderer()

        if args.command == "preview":
            context = ValidationContext(
                exploration_id=args.exploration_id,
                marche_id=args.marche_id,
                strict_mode=strict_mode,
            )
            result = pipeline.preview(raw, context)
            if args.output_format == "json":
                print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
            else:
                print(renderer.render_preview(result, source_name=args.file), end="")
            return EXIT_OK if result.valid else EXIT_REJECTED

        commit_result = pipeline.commit(raw, args.exploration_id, args.marche_id, strict_mode=strict_mode)
        if args.output_format == "json":
            print(json.dumps(commit_result.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(renderer.render_commit(commit_result, source_name=args.file), end="")
        return EXIT_OK if commit_result.committed else EXIT_REJECTED

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_REJECTED
    except DossierImportError as e:
        print(f"Import Error: {e}", file=sys.stderr)
        logger.error(
            f"Import aborted: {e.message}",
            extra={"event": "cli.import.aborted", "error_type": type(e).__name__},
        )
        return EXIT_UNPARSEABLE
    except ReportError as e:
        print(f"Report Error: {e}", file=sys.stderr)
        logger.error(
            f"Report could not be rendered: {e}",
            extra={"event": "cli.report.failed", "error_type": type(e).__name__},
        )
        return EXIT_REJECTED
    except (OSError, PersistenceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Import could not run: {e}",
            extra={"event": "cli.failed", "error_type": type(e).__name__},
        )
        return EXIT_REJECTED
    finally:
        if database_ready:
            close_database()


if __name__ == "__main__":
    sys.exit(main())
