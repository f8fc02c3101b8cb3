"""
Zone Energy Feed Generator - CLI Entry Point
Simulates per-zone energy readings with configurable anomalies
"""

import argparse
import dataclasses
import os
import sys

import structlog

from src.core.logger import setup_logging
from src.generator import (
    CHAOS_CONFIG,
    DEV_CONFIG,
    FLATLINE_FOCUS_CONFIG,
    NORMAL_CONFIG,
    QUIET_CONFIG,
    GeneratorConfig,
    InjectedAnomaly,
    ZoneEnergyGenerator,
    write_history,
)

logger = structlog.get_logger(__name__)


# Predefined configurations
CONFIGS = {
    "normal": NORMAL_CONFIG,
    "chaos": CHAOS_CONFIG,
    "flatline": FLATLINE_FOCUS_CONFIG,
    "quiet": QUIET_CONFIG,
    "dev": DEV_CONFIG,
}


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Zone Energy Feed Generator for Kafka",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
            Examples:
            # Use predefined normal config
            python -m src.generator.generate --config normal

            # Use chaos config for 300 seconds
            python -m src.generator.generate --config chaos --duration 300

            # Write 7 days of historical data for the baseline engine
            python -m src.generator.generate --backfill --seed 2026 --output data/historical-data.json
        """,
    )

    # Predefined config
    parser.add_argument(
        "--config", choices=list(CONFIGS.keys()), help="Use a predefined configuration"
    )

    # Kafka settings
    parser.add_argument(
        "--kafka-servers",
        default=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
        help="Kafka bootstrap servers (default: localhost:9092)",
    )
    parser.add_argument(
        "--topic",
        default=os.getenv("KAFKA_TOPIC", "zone-energy-readings"),
        help="Kafka topic name (default: zone-energy-readings)",
    )

    # Generation settings
    parser.add_argument("--interval", type=float, help="Interval between readings in seconds")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument(
        "--zones-file",
        default=os.getenv("ZONES_FILE"),
        help="JSON zone reference file (default: built-in plant layout)",
    )

    # Anomaly settings
    parser.add_argument(
        "--anomaly-prob", type=float, help="Probability of anomaly injection (0.0 to 1.0)"
    )
    parser.add_argument(
        "--anomalies",
        nargs="+",
        choices=[a.value for a in InjectedAnomaly],
        help="Specific anomaly types to enable",
    )

    # Runtime settings
    parser.add_argument(
        "--duration", type=int, help="Duration to run in seconds (default: infinite)"
    )

    # Backfill mode settings
    parser.add_argument(
        "--backfill",
        action="store_true",
        help="Write a historical corpus file instead of publishing to Kafka",
    )
    parser.add_argument(
        "--backfill-days",
        type=int,
        default=7,
        help="Days of historical data to generate in backfill mode (default: 7)",
    )
    parser.add_argument(
        "--backfill-interval",
        type=int,
        default=60,
        help="Seconds between backfill readings per zone (default: 60)",
    )
    parser.add_argument(
        "--output",
        default=os.getenv("HISTORICAL_DATA_FILE", "data/historical-data.json"),
        help="Output file for backfill mode (default: data/historical-data.json)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config_from_args(args) -> GeneratorConfig:
    """Build a GeneratorConfig from command-line arguments"""

    # Start with predefined config if specified
    if args.config:
        config = dataclasses.replace(CONFIGS[args.config])
        logger.info("Using predefined configuration", config_name=args.config)
    else:
        config = GeneratorConfig()
        logger.info("Using default configuration")

    # Override with command-line arguments
    if args.kafka_servers:
        config.kafka_bootstrap_servers = args.kafka_servers
    if args.topic:
        config.kafka_topic = args.topic
    if args.interval:
        config.event_interval_seconds = args.interval
    if args.seed is not None:
        config.seed = args.seed
    if args.zones_file:
        config.zones_file = args.zones_file
    if args.anomaly_prob is not None:
        config.anomaly_probability = args.anomaly_prob
    if args.anomalies:
        config.enabled_anomalies = [InjectedAnomaly(a) for a in args.anomalies]

    # Backfill settings
    config.backfill_mode = args.backfill
    if args.backfill:
        config.backfill_days = args.backfill_days
        config.backfill_interval_seconds = args.backfill_interval
        config.backfill_output = args.output

    return config


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    log_level = getattr(structlog.stdlib.logging, args.log_level)
    setup_logging(level=log_level)

    logger.info("Starting Zone Energy Feed Generator")

    try:
        config = build_config_from_args(args)

        if config.backfill_mode:
            logger.info("Running in BACKFILL mode")
            write_history(config)
        else:
            logger.info("Running in REAL-TIME mode")
            generator = ZoneEnergyGenerator(config)
            generator.run(duration_seconds=args.duration)

        logger.info("Generator completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.error("Generator failed", error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
