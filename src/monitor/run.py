"""
CLI for the real-time zone energy monitor.

Usage:
    python -m src.monitor.run [options]
"""

import argparse
import logging
import os
import sys

import structlog

from src.core.logger import setup_logging
from src.core.zones import ZoneConfigError

from .models import MonitorConfig
from .monitor import EnergyMonitor

logger = structlog.get_logger(__name__)


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Real-time zone energy monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Basic usage
        python -m src.monitor.run

        # Compare against a historical corpus, retry forever
        python -m src.monitor.run \\
            --historical-data data/historical-data.json \\
            --max-reconnect-attempts 0

        # Test run for 5 minutes
        python -m src.monitor.run --duration 300
        """,
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
        help="Kafka topic (default: zone-energy-readings)",
    )
    parser.add_argument(
        "--group-id",
        default="zone-energy-monitor",
        help="Kafka consumer group ID",
    )
    parser.add_argument(
        "--offset-reset",
        choices=["earliest", "latest"],
        default="latest",
        help="Auto offset reset (default: latest - only new readings)",
    )

    # Reconnect policy
    parser.add_argument(
        "--reconnect-base-delay",
        type=float,
        default=1.0,
        help="First reconnect delay in seconds (default: 1.0)",
    )
    parser.add_argument(
        "--reconnect-max-delay",
        type=float,
        default=30.0,
        help="Upper bound for the reconnect delay in seconds (default: 30.0)",
    )
    parser.add_argument(
        "--max-reconnect-attempts",
        type=int,
        default=5,
        help="Reconnect attempts before giving up, 0 for unlimited (default: 5)",
    )

    # Bounded state
    parser.add_argument(
        "--history-capacity",
        type=int,
        default=1500,
        help="Readings kept per zone (default: 1500)",
    )
    parser.add_argument(
        "--max-anomalies",
        type=int,
        default=50,
        help="Anomalies kept in the log (default: 50)",
    )

    # Reference data
    parser.add_argument(
        "--zones-file",
        default=os.getenv("ZONES_FILE"),
        help="JSON zone reference file (default: built-in plant layout)",
    )
    parser.add_argument(
        "--historical-data",
        default=os.getenv("HISTORICAL_DATA_FILE"),
        help="JSON historical corpus used for baselines",
    )

    # Runtime settings
    parser.add_argument(
        "--duration",
        type=int,
        help="Run for N seconds then stop (default: infinite)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config(args) -> MonitorConfig:
    """Build configuration from arguments"""
    return MonitorConfig(
        kafka_bootstrap_servers=args.kafka_servers,
        kafka_topic=args.topic,
        kafka_group_id=args.group_id,
        kafka_auto_offset_reset=args.offset_reset,
        reconnect_base_delay_seconds=args.reconnect_base_delay,
        reconnect_max_delay_seconds=args.reconnect_max_delay,
        max_reconnect_attempts=args.max_reconnect_attempts or None,
        history_capacity=args.history_capacity,
        max_anomalies=args.max_anomalies,
        zones_file=args.zones_file,
        historical_data_file=args.historical_data,
    )


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    log_level = getattr(logging, args.log_level)
    setup_logging(level=log_level)

    logger.info("Starting zone energy monitor")

    try:
        config = build_config(args)

        monitor = EnergyMonitor(config)
        monitor.run(duration_seconds=args.duration)

        logger.info("Monitor completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except ZoneConfigError as e:
        logger.error("Invalid zone reference data", error=str(e))
        return 1

    except Exception as e:
        logger.error("Monitor failed", error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
