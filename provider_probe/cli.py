"""CLI argument parsing and main entry point.

Provides three subcommands:

* ``provider-probe check APP PROVIDER``: probe one provider once.
* ``provider-probe models APP PROVIDER``: list the provider's models.
* ``provider-probe tui``: launch the Textual TUI.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from provider_probe.config.loader import find_config_file, load_settings
from provider_probe.config.schema import ProbeSettings, ProviderConfig
from provider_probe.constants import APP_NAME, APP_VERSION, APPLICATION_IDS
from provider_probe.display.console import ConsoleNotifier, print_model_listing
from provider_probe.display.logging_config import setup_logging
from provider_probe.errors import ConfigurationError, ModelCatalogError
from provider_probe.health.store import CircuitBreakerStore
from provider_probe.probe.catalog import fetch_models
from provider_probe.probe.client import HttpProbeClient
from provider_probe.probe.models import ProbeResult
from provider_probe.probe.orchestrator import ProbeOrchestrator

module_logger = logging.getLogger(__name__)


def _load(args: argparse.Namespace, *, quiet: bool = False) -> ProbeSettings:
    """Resolve and load the config, exiting with a message on failure."""
    cfg_path = find_config_file(args.config)
    try:
        settings = load_settings(cfg_path)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    log_level = args.log_level or settings.logging.level
    setup_logging(log_level, quiet=quiet)
    module_logger.info(
        "---- %s v%s (config: %s) ----",
        APP_NAME,
        APP_VERSION,
        cfg_path,
    )
    return settings


def _require_provider(
    settings: ProbeSettings, application_id: str, provider_id: str
) -> ProviderConfig:
    provider = settings.get_provider(application_id, provider_id)
    if provider is None:
        print(
            f"Error: provider '{provider_id}' is not configured for '{application_id}'.",
            file=sys.stderr,
        )
        sys.exit(2)
    return provider


# ── ``provider-probe check`` ────────────────────────────────────────────


async def _run_check(settings: ProbeSettings, application_id: str, provider_id: str) -> Optional[ProbeResult]:
    breakers = CircuitBreakerStore()
    async with HttpProbeClient(settings) as client:
        orchestrator = ProbeOrchestrator(
            application_id,
            client,
            breakers,
            ConsoleNotifier(),
            locale=settings.locale,
        )
        name = settings.display_name(application_id, provider_id)
        return await orchestrator.begin_probe(provider_id, name)


def _cmd_check(args: argparse.Namespace) -> None:
    """Entry-point for ``provider-probe check``."""
    settings = _load(args, quiet=True)
    _require_provider(settings, args.application, args.provider)
    result = asyncio.run(_run_check(settings, args.application, args.provider))
    sys.exit(0 if result is not None and result.ok else 1)


# ── ``provider-probe models`` ───────────────────────────────────────────


def _cmd_models(args: argparse.Namespace) -> None:
    """Entry-point for ``provider-probe models``."""
    settings = _load(args, quiet=True)
    provider = _require_provider(settings, args.application, args.provider)
    try:
        listing = asyncio.run(
            fetch_models(
                provider.base_url,
                provider.api_key,
                timeout_secs=args.timeout,
                headers=provider.headers,
            )
        )
    except ModelCatalogError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    print_model_listing(listing)


# ── ``provider-probe tui`` ──────────────────────────────────────────────


def _cmd_tui(args: argparse.Namespace) -> None:
    """Entry-point for ``provider-probe tui``."""
    settings = _load(args, quiet=True)
    try:
        from provider_probe.tui.app import ProbeApp

        ProbeApp(settings, application_id=args.application).run()
    except KeyboardInterrupt:
        module_logger.info("%s TUI interrupted by KeyboardInterrupt.", APP_NAME)
    except Exception as e_fatal:
        module_logger.exception("%s TUI encountered an uncaught fatal error: %s", APP_NAME, e_fatal)
        sys.exit(1)
    finally:
        module_logger.info("%s TUI finished.", APP_NAME)


# ── CLI parser construction ──────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with check/models/tui subcommands."""
    parser = argparse.ArgumentParser(
        description=f"{APP_NAME} v{APP_VERSION}",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to config.yaml (default: $PROVIDER_PROBE_CONFIG or ./config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="File log level (default: from config)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # ── check ───────────────────────────────────────────────────
    sp_check = subparsers.add_parser("check", help="Probe one provider once")
    sp_check.add_argument("application", choices=APPLICATION_IDS, help="Application id")
    sp_check.add_argument("provider", help="Provider id as configured")
    sp_check.set_defaults(func=_cmd_check)

    # ── models ──────────────────────────────────────────────────
    sp_models = subparsers.add_parser("models", help="List the models a provider offers")
    sp_models.add_argument("application", choices=APPLICATION_IDS, help="Application id")
    sp_models.add_argument("provider", help="Provider id as configured")
    sp_models.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (clamped to 5-120, default 15)",
    )
    sp_models.set_defaults(func=_cmd_models)

    # ── tui ─────────────────────────────────────────────────────
    sp_tui = subparsers.add_parser("tui", help="Launch the Textual TUI")
    sp_tui.add_argument(
        "--application",
        choices=APPLICATION_IDS,
        default=None,
        help="Application shown first (default: first configured)",
    )
    sp_tui.set_defaults(func=_cmd_tui)

    return parser


def main() -> None:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    else:
        args.func(args)
