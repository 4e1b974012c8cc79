#!/usr/bin/env python
"""CLI for the sourcecite article pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from sourcecite.config import create_from_config, get_default_config_path, load_config
from sourcecite.data import Freshness

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    topic: str
    config: Path
    freshness: Freshness | None = None
    instructions: str | None = None
    travel_subject: str | None = None
    output: Path | None = None
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


async def run(args: CLIArgs) -> bool:
    """Execute the pipeline with the given configuration.

    Args:
        args: Validated CLI arguments.

    Returns:
        Whether the generated article was accepted.
    """
    config = load_config(args.config)
    pipeline, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Running pipeline for: {args.topic}")
    logger.info(f"Config: {args.config}")

    result = await pipeline.run(
        args.topic,
        freshness=args.freshness,
        custom_instructions=args.instructions,
        style_subject=args.travel_subject,
    )

    logger.info(f"\nUsed {len(result.sources)} sources:\n")
    for i, article in enumerate(result.sources, 1):
        logger.info(f"{i}. {article.title or article.url}")
        logger.info(f"   Source: {article.source}")
        logger.info(f"   URL: {article.url}")
        if article.published_at:
            logger.info(f"   Published: {article.published_at}")

    logger.info("\n--- Generation ---")
    logger.info(f"Model calls: {len(result.generation.attempts)}")
    if result.generation.injected_sources:
        logger.info(f"Injected citations: {len(result.generation.injected_sources)}")

    logger.info("\n--- Verification ---")
    for verdict in result.verification.verdicts:
        logger.info(f"{verdict.provider}: {verdict.status}")
    for issue in result.verification.issues:
        logger.info(f"- {issue}")
    if result.style is not None:
        logger.info(f"Style valid: {result.style.is_valid}")
        for issue in result.style.issues:
            logger.info(f"- {issue}")
    logger.info(f"Accepted: {result.accepted}")

    if args.output:
        args.output.write_text(result.content)
        logger.info(f"\nArticle written to: {args.output}")
    else:
        print(result.content)

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")
    return result.accepted


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Generate a cited, fact-checked HTML article about a topic."
    )
    parser.add_argument(
        "topic",
        help="Headline or topic to write about",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--freshness",
        "-f",
        choices=[f.value for f in Freshness],
        default=None,
        help="Source recency window (default: from config)",
    )
    parser.add_argument(
        "--instructions",
        type=str,
        default=None,
        help="Extra requirements appended to the generation prompt",
    )
    parser.add_argument(
        "--travel-subject",
        type=str,
        default=None,
        help="Run the travel style check requiring this subject (e.g. a state name)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the article HTML to this file instead of stdout",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable intermediate pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            topic=ns.topic,
            config=config_path,
            freshness=ns.freshness,
            instructions=ns.instructions,
            travel_subject=ns.travel_subject,
            output=ns.output,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        accepted = asyncio.run(run(args))
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(0 if accepted else 2)


if __name__ == "__main__":
    main()
