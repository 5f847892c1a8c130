"""
Command-line entry point: expose station gauges and refresh them periodically.
"""

import argparse
import logging
import sys
from typing import List, Optional

from prometheus_client import start_http_server

from .config import LOG_LEVELS, URL_SCHEMAS, ExporterConfig
from .exceptions import ConfigurationError
from .pipeline import RefreshPipeline
from .publisher import GaugeRegistry
from .scheduler import RefreshScheduler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meteoexporter",
        description="Export the latest readings of a weather station as Prometheus gauges.",
    )
    parser.add_argument(
        "--station",
        dest="station_code",
        help="Station code, see http://dati.meteotrentino.it/service.asmx/listaStazioni",
    )
    parser.add_argument("--place", help="Place name of the station")
    parser.add_argument(
        "--interval",
        dest="interval_seconds",
        type=float,
        help="Seconds between requests. The source refreshes every 15 minutes",
    )
    parser.add_argument(
        "--listen-addr", help="Network address for the metrics HTTP server"
    )
    parser.add_argument(
        "--url-schema", choices=URL_SCHEMAS, help="Schema of the data source URL"
    )
    parser.add_argument("--host", help="Host of the data source")
    parser.add_argument(
        "--timeout",
        dest="request_timeout_seconds",
        type=float,
        help="HTTP request timeout in seconds",
    )
    parser.add_argument(
        "--timezone",
        help="IANA zone for station timestamps; default is a fixed UTC offset",
    )
    parser.add_argument(
        "--utc-offset",
        dest="utc_offset_hours",
        type=float,
        help="Fixed UTC offset of station timestamps in hours",
    )
    parser.add_argument(
        "--temperature",
        dest="temperature_enabled",
        action=argparse.BooleanOptionalAction,
        help="Enable or disable temperature",
    )
    parser.add_argument(
        "--rain",
        dest="rain_enabled",
        action=argparse.BooleanOptionalAction,
        help="Enable or disable rainfall",
    )
    parser.add_argument(
        "--humidity",
        dest="humidity_enabled",
        action=argparse.BooleanOptionalAction,
        help="Enable or disable humidity",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level",
    )
    parser.add_argument("--env-file", help="Path to a .env file with METEO_* settings")
    return parser


def load_config(argv: Optional[List[str]] = None) -> ExporterConfig:
    """Resolve configuration from the environment and command-line flags."""
    args = build_parser().parse_args(argv)
    overrides = vars(args)
    env_file = overrides.pop("env_file")
    config = ExporterConfig.from_env(dotenv_path=env_file)
    return config.with_overrides(overrides)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = load_config(argv).validate(require_metric=False)
    except ConfigurationError as e:
        logging.basicConfig(format=LOG_FORMAT)
        logger.error("Invalid configuration: %s", e)
        return 1
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)

    if not config.any_enabled:
        logger.warning("No metric enabled, closing")
        return 0

    host, port = config.listen_address
    try:
        start_http_server(port, addr=host)
    except OSError as e:
        logger.error("Cannot listen on %s: %s", config.listen_addr, e)
        return 1
    logger.info("Serving metrics on %s:%d/metrics", host, port)

    pipeline = RefreshPipeline(config, GaugeRegistry())
    logger.info("Getting data from %s", config.url)
    scheduler = RefreshScheduler(pipeline.run_cycle, config.interval_seconds)
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        pipeline.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
