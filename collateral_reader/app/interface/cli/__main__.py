import asyncio
import inspect
import typer
import logging
from typing import List, Optional
from dotenv import load_dotenv
from InquirerPy import inquirer
from collateral_reader.app.config import settings
from collateral_reader.app.infrastructure.decoders.substrate.storage_keys import (
    generate_double_storage_key,
    generate_double_storage_keys,
    generate_storage_key,
    to_hex,
)
from collateral_reader.app.interface.tasks import TASKS
from collateral_reader.app.interface.tasks.collectors.collect_asset_stats_task import (
    collect_asset_stats_task,
)
from collateral_reader.app.interface.tasks.multichain.invalidate_registry_task import (
    invalidate_registry_task,
)
from collateral_reader.app.interface.tasks.multichain.refresh_stats_task import refresh_stats_task


load_dotenv()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

app = typer.Typer()
reader_app = typer.Typer(help="cli for reading cross-chain collateral.")
app.add_typer(reader_app, name="reader")

BACKENDS = ["memory", "sqlalchemy"]


@reader_app.command("run")
def run() -> None:
    task_name = inquirer.select(
        message="Select task:",
        choices=list(TASKS.keys()),
        pointer="❯",
        instruction="Use ↑/↓ to move, Enter to select",
    ).execute()
    backend = inquirer.select(
        message="Cache backend:",
        choices=BACKENDS,
        default=settings.cache_backend,
    ).execute()

    task = TASKS[task_name]

    kwargs: dict[str, object] = {"backend": backend}

    params = inspect.signature(task).parameters

    if "reset_work_in_progress" in params:
        kwargs["reset_work_in_progress"] = inquirer.confirm(
            message="Also clear the work-in-progress flag?",
            default=False,
        ).execute()

    asyncio.run(task(**kwargs))  # type: ignore


@reader_app.command("refresh-stats")
def refresh_stats(
    backend: Optional[str] = typer.Option(None, help="Cache backend (memory | sqlalchemy)."),
) -> None:
    """Refresh the multichain stats snapshot once."""
    asyncio.run(refresh_stats_task(backend=backend))


@reader_app.command("collect")
def collect(
    backend: Optional[str] = typer.Option(None, help="Cache backend (memory | sqlalchemy)."),
) -> None:
    """Collect asset stats of every collector and print them as JSON lines."""
    asyncio.run(collect_asset_stats_task(backend=backend))


@reader_app.command("invalidate")
def invalidate(
    backend: Optional[str] = typer.Option(None, help="Cache backend (memory | sqlalchemy)."),
    reset_work_in_progress: bool = typer.Option(False, "--reset-work-in-progress"),
) -> None:
    """Drop cached chain/asset registries."""
    asyncio.run(
        invalidate_registry_task(backend=backend, reset_work_in_progress=reset_work_in_progress)
    )


@reader_app.command("storage-key")
def storage_key(
    module: str,
    item: str,
    key: List[str] = typer.Option([], "--key", "-k", help="Twox64Concat map key (up to 2)."),
    suffix: str = typer.Option("", help="Pre-encoded hex suffix appended to the key."),
) -> None:
    """Print the hex storage key of MODULE.ITEM."""
    if len(key) > 2:
        raise typer.BadParameter("at most two --key values are supported")

    if len(key) == 2:
        raw = generate_double_storage_keys(module, item, key[0], key[1])
    elif len(key) == 1:
        raw = generate_double_storage_key(module, item, key[0])
    else:
        raw = generate_storage_key(module, item)

    typer.echo("0x" + to_hex(raw) + suffix)


if __name__ == "__main__":
    LOGO = r"""
       ___      _ _       _                 _   ___              _
      / __|___ | | |__ _ | |_ ___ _ _ __ _ | | | _ \___ __ _ __| |___ _ _
     | (__/ _ \| | / _` ||  _/ -_) '_/ _` || | |   / -_) _` / _` / -_) '_|
      \___\___/|_|_\__,_| \__\___|_| \__,_||_| |_|_\___\__,_\__,_\___|_|

      --- Collateral Reader CLI ---
    """
    typer.echo(LOGO)
    app()
