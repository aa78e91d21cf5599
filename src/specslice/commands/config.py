"""Config commands -- view and modify global configuration.

Provides the ``specslice config`` sub-command group for reading,
updating, and resetting the user's global configuration file
(:class:`~specslice.models.GlobalConfig`). Settings are persisted in
the specslice config directory and control defaults such as the
extraction encoding, the DTO language, and the tag order.
"""

from __future__ import annotations

import typer

from specslice.exceptions import ConfigError
from specslice.output import error, info, print_data, print_json, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the merged result of config files and SPECSLICE_* variables.",
    ),
) -> None:
    """Show current configuration.

    Example::

        specslice config show
        specslice config show --effective
    """
    from specslice.config import get_config_dir, load_global_config, resolve_config

    try:
        config = resolve_config() if effective else load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    print_json(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'dto.language')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The updated config is validated against
    :class:`~specslice.models.GlobalConfig` before saving.

    Example::

        specslice config set encoding.format json
        specslice config set dto.language kotlin
        specslice config set tags.sort count
    """
    from specslice.config import load_global_config, save_global_config, set_config_value

    try:
        config = set_config_value(load_global_config(), key, value)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None

    save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--yes`` is given.

    Example::

        specslice config reset --yes
    """
    from specslice.config import save_global_config
    from specslice.models import GlobalConfig

    if not yes:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")


@config_app.command("path")
def config_path() -> None:
    """Print the path of the global config file.

    Example::

        specslice config path
    """
    from specslice.config import global_config_path

    print_data(str(global_config_path()))
