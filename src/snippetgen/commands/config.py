"""Config commands -- view and modify global configuration.

Provides the ``snippetgen config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~snippetgen.models.GlobalConfig`).
"""

from __future__ import annotations

import typer

from snippetgen.commands.generate import exit_on_error
from snippetgen.output import error, info, print_record, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Merges global config, ``./snippetgen.json``, ``SNIPPETGEN_*`` environment
    variables and the root CLI flags, then prints the result.

    Example::

        snippetgen config show
        snippetgen --json config show
    """
    from snippetgen.config import get_config_dir, resolve_config

    obj = ctx.obj or {}
    with exit_on_error():
        config = resolve_config(
            cli_language=obj.get("language"),
            cli_schema=obj.get("schema"),
            cli_service_root=obj.get("service_root"),
        )
    info(f"Config directory: {get_config_dir()}")
    print_record(config.model_dump(mode="json"), title="Effective configuration")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g. 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set. Comma-separated for list keys."),
) -> None:
    """Set a global configuration value.

    The value is coerced to the existing field's type; list fields such as
    ``reserved_headers`` or ``languages.disabled`` take a comma-separated
    value. The result is validated against
    :class:`~snippetgen.models.GlobalConfig` before saving.

    Example::

        snippetgen config set default_language csharp
        snippetgen config set languages.disabled java
    """
    from snippetgen.config import load_global_config, save_global_config
    from snippetgen.models import GlobalConfig

    with exit_on_error():
        config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    if isinstance(target[final_key], list):
        coerced = [item.strip() for item in value.split(",") if item.strip()]
    else:
        coerced = value
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the global configuration to defaults.

    Example::

        snippetgen config reset --force
    """
    from snippetgen.config import save_global_config
    from snippetgen.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
