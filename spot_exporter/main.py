# spot_exporter/main.py
import argparse
import logging
import signal
import sys
import threading
from importlib.metadata import PackageNotFoundError, version

from prometheus_client import REGISTRY, Info

from spot_exporter.collector import SpotMarketCollector
from spot_exporter.config_loader import load_runtime_config, parse_listen_address
from spot_exporter.logging_setup import load_logging_config
from spot_exporter.models import SessionError
from spot_exporter.server import start_metrics_server

EXIT_SIGNALS = ("SIGINT", "SIGTERM", "SIGQUIT")


def exporter_version():
    try:
        return version("aws-spot-market-exporter")
    except PackageNotFoundError:
        return "unknown"


def parse_args(argv=None):
    cfg = load_runtime_config()
    parser = argparse.ArgumentParser(description="Prometheus exporter for AWS EC2 spot market prices.")
    parser.add_argument("--web.listen-address", dest="listen_address", default=cfg["listen_address"], help="Address to listen on (default :9190)")
    parser.add_argument("--web.telemetry-path", dest="metrics_path", default=cfg["metrics_path"], help="Path under which to expose metrics (default /metrics)")
    parser.add_argument("--aws.session-region", dest="session_region", default=cfg["session_region"], help="Region used for the AWS session and region discovery")
    parser.add_argument("--aws.profile", dest="aws_profile", default=cfg["aws_profile"], help="Optional AWS CLI profile")
    parser.add_argument("--log.level", dest="log_level", default=cfg["log_level"], help="Log level (default INFO)")
    parser.add_argument("--log.config", dest="log_config", default="config/logging.yaml", help="Logging dictConfig yaml")
    parser.add_argument("--version", action="version", version=f"aws_spot_market_exporter {exporter_version()}")
    args = parser.parse_args(argv)
    args.connect_timeout = cfg["connect_timeout"]
    args.read_timeout = cfg["read_timeout"]
    return args


def wait_for_exit_signal():
    caught = {}
    done = threading.Event()

    def handler(signum, frame):
        caught["name"] = signal.Signals(signum).name
        done.set()

    for name in EXIT_SIGNALS:
        if hasattr(signal, name):
            signal.signal(getattr(signal, name), handler)

    # wait() with a timeout keeps the main thread responsive to signals
    while not done.wait(1):
        pass
    return caught["name"]


def main(argv=None):
    args = parse_args(argv)

    load_logging_config(args.log_config, level=args.log_level)
    log = logging.getLogger("spot_exporter.main")

    log.info("Starting aws_spot_market_exporter version=%s", exporter_version())
    host, port = parse_listen_address(args.listen_address)

    try:
        collector = SpotMarketCollector(
            session_region=args.session_region,
            profile=args.aws_profile,
            connect_timeout=args.connect_timeout,
            read_timeout=args.read_timeout,
        )
    except SessionError as e:
        log.critical("%s", e)
        sys.exit(1)

    Info("aws_spot_exporter_build", "Build information of the spot market exporter.").info({"version": exporter_version()})
    REGISTRY.register(collector)

    server = start_metrics_server(host, port, metrics_path=args.metrics_path)
    try:
        name = wait_for_exit_signal()
        log.info("Caught %s signal, exiting", name)
    finally:
        server.shutdown()
        server.server_close()


if __name__ == "__main__":
    main()
