"""Static package metadata surfaced by the CLI banner."""

from __future__ import annotations

from typing import Callable

name = "log_throttle"
title = "Per-group sliding-window throttling for structured log pipelines"
version = "0.1.0"
homepage = "https://github.com/bitranox/log_throttle"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "log-throttle"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Emit the metadata banner line by line through ``writer`` (default: print)."""

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:\n", "\n"]
    lines.extend(f"    {label.ljust(pad)} = {value}\n" for label, value in fields)
    emit = writer if writer is not None else (lambda text: print(text, end=""))
    for line in lines:
        emit(line)
