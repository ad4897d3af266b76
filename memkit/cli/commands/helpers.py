"""Shared helper functions for CLI commands."""

import argparse
import json
import re
import sys
from typing import Any

from memkit.core.filters import parse_tag_list


def validate_input(value: str, field_name: str, max_length: int = 1000) -> str:
    """Validate and sanitize CLI inputs."""
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")

    if len(value) > max_length:
        raise ValueError(f"{field_name} too long (max {max_length} characters)")

    # Remove null bytes and control characters except newlines
    sanitized = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)

    return sanitized


def print_json(data: Any) -> None:
    """Print data as formatted JSON."""
    print(json.dumps(data, indent=2, default=str))


def read_value(value: str) -> str:
    """``-`` reads the value from stdin, anything else is used as given."""
    if value == "-":
        return sys.stdin.read()
    return value


def validate_date(value: str) -> str:
    """argparse type for YYYY-MM-DD dates."""
    if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        raise argparse.ArgumentTypeError(f"Date must be YYYY-MM-DD, got '{value}'")
    return value


def validate_count(value: str) -> int:
    """argparse type for non-negative counts."""
    try:
        ivalue = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Count must be an integer, got '{value}'")
    if ivalue < 0:
        raise argparse.ArgumentTypeError(f"Count cannot be negative, got {ivalue}")
    return ivalue


def tags_from_args(raw) -> list:
    """Collect tags from repeated and/or comma-separated --tag values."""
    tags = []
    for item in raw or []:
        tags.extend(parse_tag_list(item))
    return tags


def confirm(prompt: str, assume_yes: bool = False) -> bool:
    if assume_yes:
        return True
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")
