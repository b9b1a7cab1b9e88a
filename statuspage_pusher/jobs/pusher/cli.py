"""CLI entry point for the pusher."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Optional, Sequence

from ...common.config import (
    env_default,
    env_flag,
    expand_path,
    load_env_file,
    parse_duration,
)
from ...common.errors import ConfigError, PusherError
from ...internal_api import InternalServer, create_app
from ...metrics.push_metrics import PushMetrics, PushRecorder
from ...push.models import StatusPageTarget
from ...push.statuspage import StatusPagePusher
from ...queries.loader import load_query_config
from ...queries.prometheus import PrometheusQueryClient
from ...resilience.backoff import BackoffPolicy
from .config import RunnerConfig
from .runner import RunLoop
from .scheduler import MetricScheduler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Flags default to PROM_SP_PUSHER_<FLAG> environment variables."""
    p = argparse.ArgumentParser(
        prog="prometheus-statuspage-pusher",
        description="Push Prometheus query results to Statuspage metrics",
    )
    p.add_argument("--prom-url", default=env_default("prom-url", "http://127.0.0.1:9090"),
                   help="address of the Prometheus query API")
    p.add_argument("--sp-domain", default=env_default("sp-domain", "https://api.statuspage.io"),
                   help="root domain used for StatusPage API")
    p.add_argument("--sp-page-id", default=env_default("sp-page-id", ""), help="StatusPage Page ID")
    p.add_argument("--sp-token", default=env_default("sp-token", ""), help="StatusPage OAuth Token")
    p.add_argument("--config", default=env_default("config", "queries.yaml"),
                   help="local path of the query config file")
    p.add_argument("--push-interval", type=parse_duration, default=env_default("push-interval", "30s"),
                   help="frequency that metrics are pushed to StatusPage")
    p.add_argument("--internal-metrics-addr", default=env_default("internal-metrics-addr", ":9090"),
                   help="address that will serve prometheus and debug data")
    p.add_argument("--debug", action="store_true", default=env_flag("debug"),
                   help="debug log verbosity")
    p.add_argument("--backoff-multiplier", type=float,
                   default=env_default("backoff-multiplier", "1.5"),
                   help="growth factor of the push interval after a failed push")
    p.add_argument("--backoff-max-interval", type=parse_duration,
                   default=env_default("backoff-max-interval"),
                   help="upper bound of the push interval while backing off "
                        "(default: 5m, or the push interval if longer)")
    p.add_argument("--backoff-jitter", type=float, default=env_default("backoff-jitter", "0"),
                   help="randomization factor applied to backoff intervals, in [0, 1)")
    p.add_argument("--backoff-max-elapsed", type=parse_duration,
                   default=env_default("backoff-max-elapsed"),
                   help="after failing this long, stop growing and retry at the max interval")
    p.add_argument("--query-timeout", type=parse_duration, default=env_default("query-timeout", "30s"),
                   help="timeout of one Prometheus query")
    p.add_argument("--push-timeout", type=parse_duration, default=env_default("push-timeout", "10s"),
                   help="timeout of one StatusPage push")
    return p


def parse_config(argv: Optional[Sequence[str]] = None) -> RunnerConfig:
    args = build_parser().parse_args(argv)

    if not args.sp_page_id:
        raise ConfigError("missing StatusPage page id (--sp-page-id)")
    if not args.sp_token:
        raise ConfigError("missing StatusPage token (--sp-token)")

    return RunnerConfig(
        prom_url=args.prom_url,
        target=StatusPageTarget(domain=args.sp_domain, page_id=args.sp_page_id, token=args.sp_token),
        config_path=expand_path(args.config),
        push_interval=args.push_interval,
        internal_metrics_addr=args.internal_metrics_addr,
        debug=bool(args.debug),
        backoff_multiplier=args.backoff_multiplier,
        backoff_max_interval=args.backoff_max_interval,
        backoff_jitter=args.backoff_jitter,
        backoff_max_elapsed=args.backoff_max_elapsed,
        query_timeout=args.query_timeout,
        push_timeout=args.push_timeout,
    )


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.info("set log level new_level=debug")


def build_run_loop(cfg: RunnerConfig, cancel: threading.Event) -> RunLoop:
    """Wire every component from a resolved config. Raises ConfigError."""
    queries = load_query_config(cfg.config_path)
    query_client = PrometheusQueryClient(cfg.prom_url, timeout=cfg.query_timeout)

    try:
        policy = BackoffPolicy(cfg.backoff_config())
    except ValueError as e:
        raise ConfigError(f"invalid backoff settings: {e}") from e

    metrics = PushMetrics()
    pusher = StatusPagePusher(cfg.target, PushRecorder(metrics), timeout=cfg.push_timeout)
    scheduler = MetricScheduler(queries, query_client, pusher, policy, metrics=metrics)
    listener = InternalServer(create_app(metrics.registry), cfg.internal_metrics_addr)
    return RunLoop(scheduler, cancel, listener=listener)


def install_signal_handlers(cancel: threading.Event) -> None:
    def _handle_signal(signum, _frame):
        logger.info("Received signal %s, shutting down", signal.Signals(signum).name)
        cancel.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)


def run(argv: Optional[Sequence[str]] = None, cancel: Optional[threading.Event] = None) -> int:
    """Run until cancelled. Returns the process exit code."""
    load_env_file()
    if cancel is None:
        cancel = threading.Event()
    try:
        cfg = parse_config(argv)
        configure_logging(cfg.debug)
        loop = build_run_loop(cfg, cancel)
        logger.info(
            "Pusher started prom_url=%s target=%r interval=%.1fs",
            cfg.prom_url, cfg.target, cfg.push_interval,
        )
        loop.run()
    except PusherError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.critical("fatal error, exiting: %s", e)
        return 1
    return 0


def main() -> None:
    cancel = threading.Event()
    install_signal_handlers(cancel)
    sys.exit(run(cancel=cancel))


if __name__ == "__main__":
    main()
