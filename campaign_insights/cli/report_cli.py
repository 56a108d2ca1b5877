"""
Command-line interface for campaign export ingestion.

Usage:
    campaign-insights process --input <file_path> [options]
    python -m campaign_insights.cli.report_cli process --input <file_path> [options]
"""

import argparse
import json
import sys
from pathlib import Path

from campaign_insights.batch.pipeline import IngestionPipeline
from campaign_insights.core.errors import FunnelSizeError, IngestionError
from campaign_insights.core.metrics import display_summary, interaction_summary
from campaign_insights.observability.logger import configure_package_logging, get_logger
from campaign_insights.utils.validation import parse_stage_list

logger = get_logger(__name__)


def _build_pipeline(args) -> IngestionPipeline:
    return IngestionPipeline.from_config_file(args.config)


def process_command(args) -> int:
    """
    Execute the process command.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        pipeline = _build_pipeline(args)
        result = pipeline.process_file(input_path, total_audience=args.total_audience)

        funnel = None
        if args.funnel:
            funnel = pipeline.build_funnel(result, parse_stage_list(args.funnel))
        elif args.suggest_funnel:
            try:
                funnel = pipeline.build_funnel(result)
            except FunnelSizeError as e:
                logger.warning(f"No funnel suggested for {result.filename}: {e}")
    except (IngestionError, FileNotFoundError, ValueError) as e:
        logger.error(f"Error during ingestion: {e}")
        return 1

    metadata = result.metadata
    output = {
        "filename": result.filename,
        "metadata": {
            **metadata.model_dump(mode="json"),
            "date_range": metadata.date_range,
        },
        "row_count": result.row_count,
        "metrics": result.metrics.model_dump(mode="json"),
        "summary": display_summary(result.metrics),
        "interactions": interaction_summary(result.metrics),
        "funnel": funnel.model_dump(mode="json") if funnel else None,
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def show_config_command(args) -> int:
    """Print the effective engine configuration."""
    try:
        pipeline = _build_pipeline(args)
    except (IngestionError, FileNotFoundError) as e:
        logger.error(f"Error loading configuration: {e}")
        return 1

    config = pipeline.config
    print(json.dumps({
        "test_user_ids": sorted(config.test_user_ids),
        "interaction_column_prefix": config.interaction_column_prefix,
        "missing_id_prefix": config.missing_id_prefix,
        "funnel_size_bounds": config.funnel_size_bounds.model_dump(),
    }, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Campaign analytics export ingestion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compute metrics for an export
  campaign-insights process --input "exports/CCI - 2025 Q1 13_05_2025 - 20_05_2025.csv"

  # Apply a manual total audience and build a funnel
  campaign-insights process --input export.csv --total-audience 25000 \\
      --funnel total_audience,unique_visitors,unique_plays,unique_completions

  # Use a client-specific configuration
  campaign-insights process --input export.csv --config config/client.yaml
        """
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to engine configuration YAML (default: config/engine.yaml if present)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: $LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "text"],
        help="Log format (default: $LOG_FORMAT or json)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Ingest an export and print its records as JSON")
    process_parser.add_argument(
        "--input",
        required=True,
        help="Path to the export CSV"
    )
    process_parser.add_argument(
        "--total-audience",
        default=None,
        help="Manually supplied total audience"
    )
    funnel_group = process_parser.add_mutually_exclusive_group()
    funnel_group.add_argument(
        "--funnel",
        default=None,
        help="Comma-separated funnel stages, in order"
    )
    funnel_group.add_argument(
        "--suggest-funnel",
        action="store_true",
        help="Build the default funnel suggestion"
    )

    subparsers.add_parser("show-config", help="Print the effective engine configuration")

    args = parser.parse_args(argv)

    if args.log_level or args.log_format:
        configure_package_logging(level=args.log_level, format_type=args.log_format)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "process":
        return process_command(args)
    return show_config_command(args)


if __name__ == "__main__":
    sys.exit(main())
