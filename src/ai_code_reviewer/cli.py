"""
AI Code Review CLI

Reviews the files staged for commit. Suitable for a git pre-commit hook.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__
from .config import AppConfig, setup_logging
from .exceptions import ConfigurationError, GitError
from .review.orchestrator import ReviewOrchestrator


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="ai-code-review", description="AI Code Review CLI tool")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", help="YAML config file")
    p.add_argument("--env-file", help="Load environment variables from this file (default: .env)")
    p.add_argument("--ext", action="append", dest="extensions", metavar="SUFFIX",
                   help="File suffix to review, repeatable (default: .ts .tsx)")
    p.add_argument("--max-concurrency", type=int, help="Cap on files reviewed at once")
    p.add_argument("--timeout", type=float, help="Review request timeout in seconds")
    p.add_argument("--verbose", "-v", action="store_true", help="Print a preview of each file's changes")
    p.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return p.parse_args(argv)


def load_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig.from_yaml(args.config) if args.config else AppConfig.from_env()
    return config.with_overrides(**{
        'review.file_extensions': tuple(args.extensions) if args.extensions else None,
        'review.max_concurrency': args.max_concurrency,
        'laas.timeout_seconds': args.timeout,
        'logging.level': args.log_level,
    })


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.env_file:
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    try:
        config = load_config(args)
        config.validate()
    except ConfigurationError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    setup_logging(config)

    orchestrator = ReviewOrchestrator(config, verbose=args.verbose)
    try:
        return asyncio.run(orchestrator.run())
    except (ConfigurationError, GitError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        orchestrator.close()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
