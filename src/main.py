"""Точка входа: один проход проверок по всем окружениям."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from src import __version__
from src.environments.catalog import EnvironmentCatalog
from src.environments.exceptions import EnvironmentConfigError
from src.monitor.executor import CommandExecutor
from src.monitor.probes import build_default_probes
from src.monitor.registry import EnvironmentRegistry
from src.monitor.report import first_container_image, render_json, render_summary
from src.monitor.workflow import WorkflowRunner, build_workflows
from src.settings.exceptions import SettingsError
from src.settings.registry import SettingsRegistry
from src.utils.logger import configure_logging
from src.utils.paths import resolve_workdir

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docker-env-monitor",
        description="Check docker version, containers and local images of each environment.",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory with config.json and environments.json (default: ~/.dockmon)",
    )
    parser.add_argument(
        "--env",
        dest="environments",
        action="append",
        default=None,
        help="Run only the named environment (may be repeated)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        metavar="SECONDS",
        help="Override monitor.command_timeout_sec for this run (0 disables the limit)",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the summary and parsed records as JSON",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def initialize_settings(config_path: Path) -> SettingsRegistry:
    """Загружает config.json в singleton реестр настроек."""

    registry = SettingsRegistry(config_path=config_path)
    registry.load_from_disk(config_path)
    return registry


def setup_logging_from_settings(base_dir: Path, settings: SettingsRegistry) -> None:
    """Настраивает логирование по группе logging."""

    logging_settings = settings.get_group("logging")
    if not logging_settings.get("enabled"):
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    configure_logging(
        log_dir=base_dir / "logs",
        level_name=logging_settings.get("level", "INFO"),
        max_bytes=logging_settings.get("max_file_size_mb", 10) * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files", 5),
    )


def initialize_workdir(base_dir: Path) -> bool:
    """Создаёт рабочую директорию и каталог логов."""

    try:
        (base_dir / "logs").mkdir(parents=True, exist_ok=True)
        return True
    except OSError as exc:
        LOGGER.error("Cannot initialize work directory %s: %s", base_dir, exc)
        return False


def select_environments(
    catalog: EnvironmentCatalog, requested: Optional[Sequence[str]]
) -> List[str]:
    """Имена окружений для запуска в порядке каталога."""

    names = catalog.names()
    if not requested:
        return names
    unknown = [name for name in requested if name not in names]
    if unknown:
        raise EnvironmentConfigError(
            f"unknown environments: {', '.join(unknown)}", path=catalog.file_path
        )
    return [name for name in names if name in requested]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Готовит окружение, выполняет все workflow и печатает сводку."""

    args = build_parser().parse_args(argv)
    base_dir: Path = args.config_dir or resolve_workdir()
    if not initialize_workdir(base_dir):
        return 1

    try:
        SettingsRegistry.reset_instance()
        settings = initialize_settings(base_dir / "config.json")
        setup_logging_from_settings(base_dir, settings)
        if args.timeout is not None:
            settings.set_value("monitor", "command_timeout_sec", args.timeout)
        catalog = EnvironmentCatalog(base_dir / "environments.json")
        names = select_environments(catalog, args.environments)
    except (SettingsError, EnvironmentConfigError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    LOGGER.info("Starting docker-env-monitor %s for %s", __version__, ", ".join(names))
    executor = CommandExecutor(
        docker_binary=settings.get_value("monitor", "docker_binary"),
        timeout_seconds=settings.get_value("monitor", "command_timeout_sec"),
        hosts=catalog.hosts(),
    )
    probes = build_default_probes(
        executor,
        exclude_system_images=settings.get_value("monitor", "exclude_system_images"),
        system_image_markers=settings.get_value("monitor", "system_image_markers"),
    )
    registry = EnvironmentRegistry(names)
    results = WorkflowRunner(registry).run_all(build_workflows(names, probes))

    render = render_json if args.json_output else render_summary
    print(render(registry, results))
    image = first_container_image(registry)
    if image is not None:
        LOGGER.debug("First container image of %s: %s", registry.names()[0], image)

    return 0 if all(result.succeeded for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
