import json
import os
from pathlib import Path

import requests
import typer

from favzone.core.calculator import recalculate
from favzone.core.models import Mode, Record
from favzone.export import to_text

app = typer.Typer()
BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
API_KEY = os.getenv("API_KEY")


def _headers():
    h = {}
    if API_KEY:
        h["X-API-Key"] = API_KEY
    return h


def _echo(r: requests.Response):
    if not r.ok:
        typer.echo(f"error {r.status_code}: {r.text}", err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(r.json(), ensure_ascii=False, indent=2))


@app.command()
def show(machine: int = 1):
    _echo(requests.get(f"{BASE}/machines/{machine}/records", headers=_headers()))


@app.command()
def add(machine: int = 1, top: bool = typer.Option(False, "--top")):
    body = {"position": "top" if top else "bottom"}
    _echo(requests.post(f"{BASE}/machines/{machine}/records", json=body, headers=_headers()))


@app.command("set")
def set_record(record_id: str, machine: int = 1, games: str = typer.Option(None),
               bonus: str = typer.Option(None, help="BB, RB, CURRENT or EMPTY"),
               separator: bool = typer.Option(None, "--separator/--no-separator")):
    body = {}
    if games is not None:
        body["gameCount"] = games
    if bonus is not None:
        body["bonusType"] = bonus
    if separator is not None:
        body["isSeparator"] = separator
    _echo(requests.patch(f"{BASE}/machines/{machine}/records/{record_id}", json=body, headers=_headers()))


@app.command()
def delete(record_id: str, machine: int = 1):
    _echo(requests.delete(f"{BASE}/machines/{machine}/records/{record_id}", headers=_headers()))


@app.command()
def clear(machine: int = 1):
    _echo(requests.post(f"{BASE}/machines/{machine}/clear", headers=_headers()))


@app.command()
def mode(value: Mode = typer.Argument(None)):
    if value is None:
        _echo(requests.get(f"{BASE}/mode", headers=_headers()))
    else:
        _echo(requests.put(f"{BASE}/mode", json={"mode": value.value}, headers=_headers()))


@app.command()
def upload(image: Path, machine: int = 1, overwrite: bool = typer.Option(False, "--overwrite")):
    suffix = image.suffix.lower().lstrip(".") or "png"
    content_type = "image/jpeg" if suffix in ("jpg", "jpeg") else f"image/{suffix}"
    with image.open("rb") as fh:
        r = requests.post(f"{BASE}/machines/{machine}/image",
                          files={"image": (image.name, fh, content_type)},
                          data={"how": "overwrite" if overwrite else "append"},
                          headers=_headers())
    _echo(r)


@app.command()
def export(machine: int = 1, fmt: str = typer.Option("csv", "--format", help="csv, json or txt"),
           out: Path = typer.Option(None)):
    if fmt not in ("csv", "json", "txt"):
        raise typer.BadParameter("format must be csv, json or txt")
    r = requests.get(f"{BASE}/machines/{machine}/export.{fmt}", headers=_headers())
    if not r.ok:
        typer.echo(f"error {r.status_code}: {r.text}", err=True)
        raise typer.Exit(1)
    if out:
        out.write_bytes(r.content)
        typer.echo(f"saved {out}")
    else:
        typer.echo(r.content.decode("utf-8-sig"))


@app.command()
def calc(path: Path, mode: Mode = Mode.GOLD):
    """Recalculate a JSON export (or a bare list of records) offline."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    items = payload["data"] if isinstance(payload, dict) else payload
    records = [Record.model_validate(item) for item in items]
    typer.echo(to_text(recalculate(records, mode), mode))


if __name__ == "__main__":
    app()
