"""Export utilities for items and read results."""

from pathlib import Path

from pydantic import BaseModel


def to_json(model: BaseModel, indent: int | None = 2) -> str:
    """
    Convert an item model to a camelCase JSON string.

    Args:
        model: Item, ItemView or ItemReadResult
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return model.model_dump_json(indent=indent, by_alias=True)


def to_dict(model: BaseModel) -> dict:
    """
    Convert an item model to a JSON-safe dictionary with camelCase keys.

    This is the shape returned by the HTTP API.
    """
    return model.model_dump(mode="json", by_alias=True)


def save_json(model: BaseModel, filepath: str | Path, indent: int = 2) -> Path:
    """
    Save an item model to a JSON file.

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(model, indent=indent), encoding="utf-8")
    return path
