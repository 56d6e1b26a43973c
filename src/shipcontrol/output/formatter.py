from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from rich.console import Console

from shipcontrol.output.json_output import format_json_error, format_json_response
from shipcontrol.output.rich_output import RichOutput

if TYPE_CHECKING:
    from io import TextIOBase


class OutputFormatter:
    """Unified output formatter that auto-detects JSON vs Rich output.

    Selection logic:

    * If *force_format* is provided, use it unconditionally.
    * Otherwise, if *stream* (default ``sys.stdout``) is a TTY, use ``"rich"``.
    * If the stream is **not** a TTY (piped / redirected), use ``"json"``.

    When the format is ``"quiet"``, a :class:`rich.console.Console` writing to
    *stderr* is used so that normal stdout stays empty.
    """

    def __init__(
        self,
        *,
        stream: TextIOBase | Any | None = None,
        force_format: str | None = None,
    ) -> None:
        self._stream = stream or sys.stdout
        if force_format is not None:
            self._format = force_format
        elif hasattr(self._stream, "isatty") and self._stream.isatty():
            self._format = "rich"
        else:
            self._format = "json"

        if self._format == "quiet":
            self._console = Console(stderr=True)
        else:
            self._console = Console(file=stream) if stream is not None else Console()

        self._rich = RichOutput(self._console)

    @property
    def format(self) -> str:  # noqa: A003
        """Return the active output format (``"rich"``, ``"json"``, or ``"quiet"``)."""
        return self._format

    @property
    def rich(self) -> RichOutput:
        return self._rich

    def output(self, data: Any, *, command: str) -> None:
        """Emit *data* as one compact JSON line, or as plain text otherwise."""
        if self._format == "json":
            self._write(format_json_response(data=data, command=command, compact=True))
        else:
            self._rich.info(str(data))

    def output_error(self, *, code: str, message: str, command: str) -> None:
        if self._format == "json":
            self._write(format_json_error(code=code, message=message, command=command))
        else:
            self._rich.error(message)

    def _write(self, line: str) -> None:
        print(line, file=self._stream, flush=True)  # noqa: T201
