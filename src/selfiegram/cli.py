from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn
from uuid import UUID

import typer
from PIL import Image, UnidentifiedImageError

from selfiestore import SelfieStore, SelfieStoreError, load_config
from selfiestore.schemas import Selfie, normalize_selfie_id

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = typer.Typer(help="Selfiegram CLI")
debug_app = typer.Typer(help="Debug commands")
app.add_typer(debug_app, name="debug")

_ROOT_OPTION = typer.Option(
    Path("data/selfies"),
    "--root",
    help="Storage directory for selfie records and images.",
)
_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Optional config file; its directory overrides --root.",
    exists=True,
    dir_okay=False,
    readable=True,
)


@app.command("new")
def new_selfie(
    title: str = typer.Option(..., "--title", "-t", help="Selfie title."),
    image_path: Path | None = typer.Option(
        None,
        "--image",
        help="Optional image file to attach.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Create and save a new selfie."""
    store = _open_store(root, config_path)
    image = _read_image(image_path) if image_path is not None else None
    selfie = Selfie(title=title)
    try:
        store.save(selfie)
        if image is not None:
            store.set_image(selfie, image)
    except SelfieStoreError as exc:
        _fail(str(exc))
    typer.echo(str(selfie.id))


@app.command("list")
def list_selfies(
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """List all saved selfies."""
    store = _open_store(root, config_path)
    try:
        selfies = store.list()
    except SelfieStoreError as exc:
        _fail(str(exc))
    typer.echo(_render_selfie_lines(store, selfies))
    typer.echo(f"total={len(selfies)}")


@app.command("show")
def show_selfie(
    selfie_id: str = typer.Argument(..., help="Selfie id."),
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Print one selfie record as JSON."""
    store = _open_store(root, config_path)
    selfie = store.load(_parse_id(selfie_id))
    if selfie is None:
        _fail(f"selfie not found: {selfie_id}")
    typer.echo(selfie.model_dump_json(indent=2))


@app.command("rename")
def rename_selfie(
    selfie_id: str = typer.Argument(..., help="Selfie id."),
    title: str = typer.Argument(..., help="New title."),
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Change the title of a saved selfie."""
    store = _open_store(root, config_path)
    selfie = store.load(_parse_id(selfie_id))
    if selfie is None:
        _fail(f"selfie not found: {selfie_id}")
    selfie.title = title
    try:
        store.save(selfie)
    except SelfieStoreError as exc:
        _fail(str(exc))
    typer.echo(f"renamed {selfie.id}")


@app.command("attach")
def attach_image(
    selfie_id: str = typer.Argument(..., help="Selfie id."),
    image_path: Path = typer.Argument(
        ...,
        help="Image file to attach.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Attach (or replace) the image of a selfie."""
    store = _open_store(root, config_path)
    key = _require_selfie(store, selfie_id)
    try:
        store.set_image(key, _read_image(image_path))
    except SelfieStoreError as exc:
        _fail(str(exc))
    typer.echo(f"attached {key}")


@app.command("detach")
def detach_image(
    selfie_id: str = typer.Argument(..., help="Selfie id."),
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Remove the image of a selfie, keeping the record."""
    store = _open_store(root, config_path)
    key = _require_selfie(store, selfie_id)
    try:
        store.set_image(key, None)
    except SelfieStoreError as exc:
        _fail(str(exc))
    typer.echo(f"detached {key}")


@app.command("export")
def export_image(
    selfie_id: str = typer.Argument(..., help="Selfie id."),
    out_path: Path = typer.Argument(..., help="Output JPEG path."),
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Write the image of a selfie to a JPEG file."""
    store = _open_store(root, config_path)
    image_file = store.images.path_for(_parse_id(selfie_id))
    if not image_file.is_file():
        _fail(f"no image for selfie: {selfie_id}")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        out_path.write_bytes(image_file.read_bytes())
    except OSError as exc:
        _fail(str(exc))
    typer.echo(f"exported={out_path}")


@app.command("delete")
def delete_selfie(
    selfie_id: str = typer.Argument(..., help="Selfie id."),
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Delete a selfie record together with its image."""
    store = _open_store(root, config_path)
    key = _parse_id(selfie_id)
    try:
        store.delete(key)
    except SelfieStoreError as exc:
        _fail(str(exc))
    typer.echo(f"deleted {key}")


@debug_app.command("storage")
def debug_storage(
    root: Path = _ROOT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Run storage smoke test."""
    store = _open_store(root, config_path)
    sample = store.create("storage smoke test")
    store.set_image(sample, Image.new("RGB", (16, 16), color=(200, 40, 40)))

    loaded = store.load(sample.id)
    image = store.get_image(sample.id)
    store.delete(sample)

    if (
        loaded != sample
        or image is None
        or store.load(sample.id) is not None
        or store.get_image(sample.id) is not None
    ):
        typer.echo("storage smoke test failed", err=True)
        raise typer.Exit(code=1)

    typer.echo("storage ok")


def _open_store(root: Path, config_path: Path | None) -> SelfieStore:
    if config_path is None:
        return SelfieStore(root)
    try:
        config = load_config(config_path)
    except ValueError as exc:
        _fail(str(exc))
    return SelfieStore.from_config(config)


def _parse_id(raw: str) -> UUID:
    try:
        return normalize_selfie_id(raw)
    except ValueError as exc:
        _fail(str(exc))


def _require_selfie(store: SelfieStore, raw: str) -> UUID:
    key = _parse_id(raw)
    if not store.catalog.exists(key):
        _fail(f"selfie not found: {raw}")
    return key


def _read_image(path: Path) -> Image.Image:
    try:
        with Image.open(path) as opened:
            opened.load()
            return opened.copy()
    except (OSError, UnidentifiedImageError) as exc:
        _fail(f"cannot read image {path}: {exc}")


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _render_selfie_lines(store: SelfieStore, selfies: list[Selfie]) -> str:
    if not selfies:
        return "no selfies found"

    lines = []
    for selfie in selfies:
        has_image = "image" if store.images.path_for(selfie.id).exists() else "-"
        created = selfie.created.isoformat(timespec="seconds")
        lines.append(f"{selfie.id}  {created}  {has_image:<5}  {selfie.title}")
    return "\n".join(lines)


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
