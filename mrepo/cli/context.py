from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from mrepo.core.config import Settings, load_settings, resolve_registry_path
from mrepo.core.result import Err
from mrepo.git.registry import Registry, load_registry, save_registry
from mrepo.output.console import ConsoleProtocol, RichConsole
from mrepo.output.errors import error_exit_code, print_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    registry_path: Path
    registry: Registry
    console: ConsoleProtocol

    def save(self) -> None:
        """Persist the registry, exiting on failure."""
        result = save_registry(self.registry, self.registry_path)
        if isinstance(result, Err):
            print_error(result.error, self.console)
            raise typer.Exit(code=error_exit_code(result.error))


def build_context(*, verbose: bool = False) -> CLIContext:
    console = RichConsole(verbose=verbose)

    settings_result = load_settings()
    if isinstance(settings_result, Err):
        print_error(settings_result.error, console)
        raise typer.Exit(code=error_exit_code(settings_result.error))
    settings = settings_result.value

    registry_path = resolve_registry_path(settings)
    registry_result = load_registry(registry_path)
    if isinstance(registry_result, Err):
        print_error(registry_result.error, console)
        raise typer.Exit(code=error_exit_code(registry_result.error))

    console.debug(f"registry: {registry_path} ({len(registry_result.value)} repositories)")
    return CLIContext(
        settings=settings,
        registry_path=registry_path,
        registry=registry_result.value,
        console=console,
    )
