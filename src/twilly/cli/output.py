"""Rendering of Twilio resources in the terminal."""

import json
from pathlib import Path
from typing import Iterable

import aiofiles
import typer
from pydantic import BaseModel


def to_json(model: BaseModel) -> str:
    return json.dumps(model.model_dump(mode="json"), indent=2, ensure_ascii=False)


def print_details(model: BaseModel) -> None:
    typer.echo(to_json(model))
    typer.echo()


async def write_json(path: Path, models: Iterable[BaseModel]) -> None:
    """Write models as a pretty printed JSON array."""
    payload = [m.model_dump(mode="json") for m in models]
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(json.dumps(payload, indent=2, ensure_ascii=False))
