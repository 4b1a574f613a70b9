"""INFRA-DRISHTI - dashboard entry point.

Wires the shared services into a Store and, when run from the command line,
executes an optional discovery query headlessly and prints the asset registry.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from drishti.dashboard.state import AppState, Store
from drishti.shared.core.configuration import LoggingConfig, SystemConfig, get_config, get_config_manager
from drishti.shared.core.event_bus import EventBus
from drishti.shared.core.service_registry import register_cleanup_handler, run_cleanup, set_session_manager
from drishti.shared.domain.assets.store import AssetStore
from drishti.shared.domain.context.session.session_manager import SessionManager
from drishti.shared.domain.discovery.aggregator import DiscoveryAggregator
from drishti.shared.domain.navigation.router import ViewRouter
from drishti.shared.domain.theme.theme_state import ThemeState, detect_os_dark_mode
from drishti.shared.infrastructure.llm.base import DiscoveryProvider
from drishti.shared.infrastructure.llm.provider_factory import ProviderFactory
from drishti.shared.infrastructure.persistence.duckdb_service import DuckDBPersistenceService
from drishti.shared.infrastructure.seed.asset_loader import load_seed_assets

logger = logging.getLogger(__name__)

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(config: LoggingConfig) -> Path:
    """Configure root logging.

    File handler: everything at the configured level to <log_dir>/drishti.log
    Console handler: only WARNING and above
    """
    logs_dir = Path(config.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = logs_dir / "drishti.log"

    file_log_level = LOG_LEVEL_MAP.get(config.level.upper(), logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)
    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    # Suppress verbose third-party library logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info(f"Logging configured: file={log_file_path}, console=WARNING+")
    return log_file_path


async def init_services(
    config: SystemConfig,
    provider: Optional[DiscoveryProvider] = None,
) -> Store:
    """Initialize all services and publish them through the Store."""
    event_bus = EventBus()

    persistence = DuckDBPersistenceService(config.database.db_path)
    persistence.start()
    register_cleanup_handler(persistence.close)

    session_manager = SessionManager(persistence)
    set_session_manager(session_manager)

    seed_assets = load_seed_assets(config.ui.seed_assets_path)

    theme = ThemeState(
        persistence,
        key=config.ui.theme_key,
        os_preference=lambda: detect_os_dark_mode(config.ui.os_dark_mode),
    )
    router = ViewRouter(session_manager, initial=config.ui.default_view)

    app_state = AppState(event_bus, AssetStore(seed_assets), router, theme)
    await app_state.initialize()

    if provider is None:
        provider = ProviderFactory.create_from_config(config.discovery)
    discovery = DiscoveryAggregator(app_state, provider, config.discovery)
    await discovery.start()

    logger.info(
        f"Services initialized: {len(app_state.assets)} seed asset(s), "
        f"view '{app_state.view.value}', dark_mode={app_state.dark_mode}"
    )
    return Store.initialize(app_state, discovery)


async def shutdown_services(store: Store) -> None:
    await store.app.bus.wait_until_idle(timeout=5.0)
    if store.discovery is not None:
        await store.discovery.provider.close()
    set_session_manager(None)
    run_cleanup()
    Store.reset()


def render_assets(console: Console, app_state: AppState) -> None:
    """Print the asset registry, marking the selection."""
    selected = app_state.selected_asset
    table = Table(title=f"Assets ({len(app_state.assets)}) - view: {app_state.view.value}")
    table.add_column("", width=1)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Lat", justify="right")
    table.add_column("Lng", justify="right")
    table.add_column("Risk", justify="right")
    table.add_column("Zone")

    for asset in app_state.assets:
        table.add_row(
            "*" if selected is not None and asset.id == selected.id else "",
            asset.id,
            asset.name,
            asset.type.value,
            f"{asset.latitude:.4f}",
            f"{asset.longitude:.4f}",
            f"{asset.risk_score:g}",
            asset.zone,
        )
    console.print(table)


async def run(
    config: SystemConfig,
    query: Optional[str] = None,
    view: Optional[str] = None,
    toggle_theme: bool = False,
    console: Optional[Console] = None,
    provider: Optional[DiscoveryProvider] = None,
) -> int:
    console = console or Console()
    store = await init_services(config, provider)
    try:
        if toggle_theme:
            dark = store.app.toggle_theme()
            console.print(f"Theme: {'dark' if dark else 'light'}")
        if view:
            active = store.app.navigate(view)
            console.print(f"View: {active.value}")
        if query:
            assert store.discovery is not None
            with console.status(f"Discovering '{query}'..."):
                outcome = await store.discovery.discover(query)
            console.print(f"Discovery {outcome.status.value}: {len(outcome.assets)} new asset(s)")
            if outcome.error:
                console.print(f"[red]{outcome.error}[/red]")
        render_assets(console, store.app)
    finally:
        await shutdown_services(store)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="drishti", description="INFRA-DRISHTI headless dashboard")
    parser.add_argument("--query", "-q", help="Discovery query to run against the provider")
    parser.add_argument("--view", help="View to navigate to before printing")
    parser.add_argument("--toggle-theme", action="store_true", help="Flip and persist the theme preference")
    parser.add_argument("--config-dir", type=Path, help="Directory holding defaults/user/project YAML")
    args = parser.parse_args(argv)

    load_dotenv()
    if args.config_dir:
        get_config_manager(args.config_dir)
    config = get_config()
    configure_logging(config.logging)

    return asyncio.run(run(config, query=args.query, view=args.view, toggle_theme=args.toggle_theme))


if __name__ == "__main__":
    raise SystemExit(main())
