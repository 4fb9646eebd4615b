"""CLI interface for pydbxsync."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .api import DbxClient
from .auth import require_access_token
from .config import config
from .exceptions import DbxAPIError, DbxConfigError, DbxError
from .hasher import file_content_hash
from .output import OutputFormatter
from .progress import TransferProgressDisplay
from .sync import (
    InteractiveGate,
    SyncEngine,
    SyncOperations,
    SyncOptions,
    SyncPair,
    load_sync_pairs_from_json,
    pairs_from_args,
)
from .utils import format_timestamp, normalize_remote_path

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--access-token",
    "-t",
    envvar="DROPBOX_ACCESS_TOKEN",
    help="Access token for the remote store",
)
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option()
@click.pass_context
def main(
    ctx: Any,
    access_token: Optional[str],
    json: bool,
    verbose: bool,
) -> None:
    """pydbxsync - Sync local files with Dropbox using content hashes."""
    ctx.ensure_object(dict)
    ctx.obj["access_token"] = access_token
    ctx.obj["json"] = json

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pydbxsync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--access-token",
    "-t",
    prompt="Enter your access token",
    hide_input=True,
    help="Access token for the remote store",
)
@click.pass_context
def init(ctx: Any, access_token: str) -> None:
    """Store an access token in ~/.config/pydbxsync/config."""
    out = OutputFormatter(json_output=ctx.obj["json"])

    out.info("Validating access token...")
    try:
        client = DbxClient(access_token=access_token)
        try:
            account = client.get_current_account()
        finally:
            client.close()
        name = (account.get("name") or {}).get("display_name") or account.get(
            "email", "unknown account"
        )
        out.success(f"Access token is valid ({name})")
    except DbxAPIError as e:
        out.error(f"Access token validation failed: {e}")
        if not click.confirm("Save access token anyway?", default=False):
            out.warning("Configuration cancelled.")
            ctx.exit(1)

    try:
        config.save_access_token(access_token)
    except OSError as e:
        out.error(f"Could not save configuration: {e}")
        ctx.exit(1)

    out.print_summary(
        "Initialization Complete",
        [
            ("Status", "Configuration saved successfully"),
            ("Config file", str(config.get_config_path())),
        ],
    )


@main.command()
@click.argument("paths", nargs=-1)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Do not report unchanged files (errors and conflicts are still shown)",
)
@click.option("--yes", "-y", is_flag=True, help="Assume yes to all prompts")
@click.option(
    "--pairs-file",
    "-f",
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON file with a list of {local, remote} pairs",
)
@click.pass_context
def sync(
    ctx: Any,
    paths: tuple[str, ...],
    quiet: bool,
    yes: bool,
    pairs_file: Optional[Path],
) -> None:
    """Sync local files with remote files.

    PATHS alternate between a local path and its remote path:

        pydbxsync sync notes.txt /notes.txt todo.md /work/todo.md

    For every pair, the file is uploaded if only the local side exists or the
    local copy is newer, downloaded if only the remote side exists or the
    remote copy is newer, and left alone if the contents are identical.
    """
    json_output = ctx.obj["json"]
    out = OutputFormatter(json_output=json_output, quiet=quiet)

    try:
        pairs: list[SyncPair] = []
        if pairs_file is not None:
            pairs.extend(load_sync_pairs_from_json(pairs_file))
        pairs.extend(pairs_from_args(paths))
        if not pairs:
            raise DbxConfigError("No files to sync. Give LOCAL REMOTE path pairs.")
        client = DbxClient(access_token=require_access_token(ctx))
    except DbxConfigError as e:
        out.error(str(e))
        ctx.exit(1)

    engine = SyncEngine(
        client,
        options=SyncOptions(quiet=quiet, assume_yes=yes),
        gate=InteractiveGate(),
        output=out,
        progress=None if quiet or json_output else TransferProgressDisplay(),
    )

    try:
        results = engine.run(pairs)
    except KeyboardInterrupt:
        out.warning("Sync cancelled by user")
        ctx.exit(130)
    finally:
        client.close()

    if json_output:
        out.output_json(
            [
                {
                    "local": str(result.pair.local),
                    "remote": result.pair.remote,
                    "status": result.status.value,
                    "reason": result.decision.reason if result.decision else None,
                    "error": result.error,
                }
                for result in results
            ]
        )


@main.command(name="hash")
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def hash_command(ctx: Any, files: tuple[Path, ...]) -> None:
    """Print the content hash of local files, as the remote store computes it."""
    out = OutputFormatter(json_output=ctx.obj["json"])
    hashes = {}
    failed = False

    for file_path in files:
        try:
            hashes[str(file_path)] = file_content_hash(file_path)
        except DbxError as e:
            out.error(str(e))
            failed = True
            continue
        out.print(f"{hashes[str(file_path)]}  {file_path}")

    if ctx.obj["json"]:
        out.output_json(hashes)
    if failed:
        ctx.exit(1)


@main.command()
@click.argument("remote_path")
@click.pass_context
def stat(ctx: Any, remote_path: str) -> None:
    """Show content hash and modification time of a remote file."""
    out = OutputFormatter(json_output=ctx.obj["json"])

    try:
        client = DbxClient(access_token=require_access_token(ctx))
    except DbxConfigError as e:
        out.error(str(e))
        ctx.exit(1)

    remote_path = normalize_remote_path(remote_path)

    try:
        metadata = SyncOperations(client).get_remote_metadata(remote_path)
    except DbxError as e:
        out.error(str(e))
        ctx.exit(1)
    finally:
        client.close()

    if ctx.obj["json"]:
        out.output_json(
            {
                "path": metadata.path,
                "exists": metadata.exists,
                "content_hash": metadata.content_hash,
                "client_modified": (
                    format_timestamp(metadata.modified_at)
                    if metadata.modified_at is not None
                    else None
                ),
                "size": metadata.size,
            }
        )
        return

    if not metadata.exists:
        out.warning(f"{remote_path} does not exist")
        ctx.exit(1)

    out.print_summary(
        metadata.path,
        [
            ("Content hash", metadata.content_hash or ""),
            ("Modified", format_timestamp(metadata.modified_at or 0)),
            ("Size", out.format_size(metadata.size or 0)),
            ("Revision", metadata.rev or ""),
        ],
    )


if __name__ == "__main__":
    main()
