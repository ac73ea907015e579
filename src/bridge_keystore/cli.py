# CLI implementation using Typer: `bridge-keys keys {cosmos,eth} {add,import,delete,rename,list,show}`.
from __future__ import annotations

import contextlib
import os
import sys
from pathlib import Path
from typing import Iterator, Optional

import typer

from . import __version__
from .config import AppConfig, dump_default_config, load_config
from .core.exceptions import CorruptRecord, KeystoreError, StorageIOError
from .crypto.derivation import generate_mnemonic
from .logging import configure_logging
from .models import Chain, KeyIdentity
from .paths import runtime_config_dir
from .services.key_manager import KeyManager

app = typer.Typer(help="Bridge orchestrator key management")
keys_app = typer.Typer(help="Manage signing keys per chain")
app.add_typer(keys_app, name="keys")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"bridge-keys {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", metavar="PATH", help="Config file"),
    home: Optional[Path] = typer.Option(None, "--home", metavar="DIR", help="Keystore directory"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    # config is read per command; init-config never reads it
    ctx.obj = {"config": config, "home": home}


@app.command("init-config")
def init_config(
    target: Optional[Path] = typer.Argument(None, help="Where to write the file (defaults to the user config dir)"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a config file populated with the defaults"""
    path = target or runtime_config_dir() / "config.yaml"
    if path.exists() and not force:
        typer.echo(f"error: {path} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(code=1)
    dump_default_config(path)
    typer.echo(f"Wrote {path}")


def _load_config(ctx: typer.Context) -> AppConfig:
    options = ctx.find_root().obj or {}
    app_config = load_config(options.get("config"))
    home = options.get("home")
    if home is not None:
        keystore = app_config.keystore.model_copy(update={"path": home.expanduser()})
        app_config = app_config.model_copy(update={"keystore": keystore})
    configure_logging(app_config.logging.normalized_level(), stream=sys.stderr)
    return app_config


def _manager(ctx: typer.Context) -> KeyManager:
    config = _load_config(ctx)
    root = config.keystore.path
    # the engine never creates its root
    try:
        root.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageIOError(f"Could not create keystore directory {root}: {exc.strerror}") from exc
    return KeyManager.from_config(config)


@contextlib.contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except (KeystoreError, ValueError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def _read_passphrase(env_var: Optional[str], *, confirm: bool) -> str:
    if env_var:
        value = os.environ.get(env_var)
        if not value:
            typer.echo(f"error: environment variable {env_var} is not set", err=True)
            raise typer.Exit(code=1)
        return value
    return typer.prompt("Passphrase", hide_input=True, confirmation_prompt=confirm)


def _echo_identity(identity: KeyIdentity) -> None:
    typer.echo(f"name:       {identity.name}")
    typer.echo(f"chain:      {identity.chain.value}")
    typer.echo(f"address:    {identity.address}")
    typer.echo(f"public key: {identity.public_key_hex}")
    if identity.derivation_path:
        typer.echo(f"path:       {identity.derivation_path}")


def _passphrase_env_option():
    return typer.Option(
        None, "--passphrase-env", metavar="VAR", help="Read the passphrase from this environment variable"
    )


def _chain_app(chain: Chain) -> typer.Typer:
    sub = typer.Typer(help=f"Manage {chain.value} keys")

    @sub.command("add")
    def add(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Key name"),
        recoverable: bool = typer.Option(
            False, "--recoverable", help="Derive from a new mnemonic and print it for backup"
        ),
        words: int = typer.Option(24, "--words", help="Mnemonic length with --recoverable"),
        passphrase_env: Optional[str] = _passphrase_env_option(),
    ) -> None:
        """Generate a new key"""
        with _handle_errors():
            manager = _manager(ctx)
            passphrase = _read_passphrase(passphrase_env, confirm=True)
            if recoverable:
                mnemonic = generate_mnemonic(words)
                identity = manager.import_mnemonic(name, chain, mnemonic, passphrase)
                typer.echo("**Important** write this mnemonic down and keep it safe:")
                typer.echo(mnemonic)
            else:
                identity = manager.add(name, chain, passphrase)
        _echo_identity(identity)

    @sub.command("import")
    def import_(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Key name"),
        mnemonic: Optional[str] = typer.Argument(None, help="BIP39 mnemonic (prompted if omitted)"),
        account: int = typer.Option(0, "--account", min=0, help="HD account index"),
        passphrase_env: Optional[str] = _passphrase_env_option(),
    ) -> None:
        """Import a key from a BIP39 mnemonic"""
        with _handle_errors():
            manager = _manager(ctx)
            phrase = mnemonic or typer.prompt("Mnemonic", hide_input=True)
            passphrase = _read_passphrase(passphrase_env, confirm=True)
            identity = manager.import_mnemonic(name, chain, phrase, passphrase, account_index=account)
        _echo_identity(identity)

    @sub.command("delete")
    def delete(ctx: typer.Context, name: str = typer.Argument(..., help="Key name")) -> None:
        """Permanently delete a key"""
        with _handle_errors():
            _manager(ctx).delete(name, chain)
        typer.echo(f"Deleted {name}")

    @sub.command("rename")
    def rename(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Current key name"),
        new_name: str = typer.Argument(..., help="New key name"),
    ) -> None:
        """Rename a key"""
        with _handle_errors():
            _manager(ctx).rename(name, new_name, chain)
        typer.echo(f"Renamed {name} -> {new_name}")

    @sub.command("list")
    def list_(ctx: typer.Context) -> None:
        """List keys with their addresses"""

        def report(exc: CorruptRecord) -> None:
            typer.echo(f"warning: skipped {exc}", err=True)

        with _handle_errors():
            found = False
            for info in _manager(ctx).list(chain, on_corrupt=report):
                found = True
                typer.echo(f"{info.name}\t{info.address}")
        if not found:
            typer.echo("No keys found")

    @sub.command("show")
    def show(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Key name"),
        passphrase_env: Optional[str] = _passphrase_env_option(),
    ) -> None:
        """Decrypt a key and show its public identity"""
        with _handle_errors():
            manager = _manager(ctx)
            passphrase = _read_passphrase(passphrase_env, confirm=False)
            identity = manager.show(name, chain, passphrase)
        _echo_identity(identity)

    return sub


keys_app.add_typer(_chain_app(Chain.COSMOS), name="cosmos")
keys_app.add_typer(_chain_app(Chain.ETHEREUM), name="eth")


if __name__ == "__main__":
    app()
