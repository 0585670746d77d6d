"""Form data parsing — URL-encoded and multipart.

URL-encoded forms use stdlib ``urllib.parse``; multipart bodies are
parsed with ``python-multipart``. Upload limits never raise: a file
that breaks a limit is recorded as an :class:`UploadedFile` carrying an
``error_code`` so the handler can report it to the user.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

from python_multipart.multipart import MultipartParser, parse_options_header

# Longest accepted multipart field name
FIELD_NAME_LIMIT = 256

LIMIT_FILE_SIZE = "LIMIT_FILE_SIZE"
LIMIT_FIELD_KEY = "LIMIT_FIELD_KEY"

_ERROR_MESSAGES = {
    LIMIT_FILE_SIZE: "File too large",
    LIMIT_FIELD_KEY: "Field name too long",
}


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """A file received in a multipart body, held in memory.

    When a limit was exceeded, ``content`` is empty, ``size`` is 0 and
    ``error_code``/``error_message`` describe the failure.
    """

    field_name: str
    filename: str | None
    content_type: str | None
    size: int
    content: bytes = b""
    error_code: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_code is None

    def save(self, path: str | Path) -> None:
        """Write the file content to disk. Parent directories must exist."""
        Path(path).write_bytes(self.content)

    def __repr__(self) -> str:
        if self.error_code:
            return f"UploadedFile({self.field_name!r}, error={self.error_code})"
        return f"UploadedFile({self.field_name!r}, {self.filename!r}, {self.size} bytes)"


class FormData(Mapping[str, str]):
    """Immutable parsed form fields.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))


def parse_urlencoded(body: bytes) -> FormData:
    """Parse URL-encoded form data using stdlib."""
    return FormData(parse_qs(body.decode("utf-8"), keep_blank_values=True))


@dataclass(frozen=True, slots=True)
class MultipartResult:
    """Fields and files of one multipart body, files in arrival order."""

    form: FormData
    files: tuple[UploadedFile, ...]


def parse_multipart(body: bytes, content_type: str, *, file_size_limit: int) -> MultipartResult:
    """Parse a ``multipart/form-data`` body.

    Raises:
        ValueError: The content type carries no boundary.
    """
    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}
    files: list[UploadedFile] = []

    # Track current part state
    headers: dict[str, str] = {}
    chunks = bytearray()
    field_name: str | None = None
    filename: str | None = None
    overflow = False

    def on_part_begin() -> None:
        nonlocal headers, chunks, field_name, filename, overflow
        headers = {}
        chunks = bytearray()
        field_name = None
        filename = None
        overflow = False

    def on_part_data(data_chunk: bytes, start: int, end: int) -> None:
        nonlocal overflow
        if overflow:
            return
        chunks.extend(data_chunk[start:end])
        if filename is not None and len(chunks) > file_size_limit:
            overflow = True
            chunks.clear()

    def on_part_end() -> None:
        if field_name is None:
            return

        error = None
        if len(field_name) > FIELD_NAME_LIMIT:
            error = LIMIT_FIELD_KEY
        elif overflow:
            error = LIMIT_FILE_SIZE

        if filename is None and error is None:
            data.setdefault(field_name, []).append(chunks.decode("utf-8", errors="replace"))
            return

        if error is not None:
            files.append(
                UploadedFile(
                    field_name=field_name,
                    filename=filename,
                    content_type=headers.get("content-type"),
                    size=0,
                    error_code=error,
                    error_message=_ERROR_MESSAGES[error],
                )
            )
            return

        content = bytes(chunks)
        files.append(
            UploadedFile(
                field_name=field_name,
                filename=filename,
                content_type=headers.get("content-type", "application/octet-stream"),
                size=len(content),
                content=content,
            )
        )

    def on_header_field(hdata: bytes, start: int, end: int) -> None:
        # Header field name, stored until its value arrives
        headers["_pending_field"] = hdata[start:end].decode("latin-1").lower()

    def on_header_value(hdata: bytes, start: int, end: int) -> None:
        nonlocal field_name, filename
        name = headers.pop("_pending_field", "")
        value = hdata[start:end].decode("latin-1")
        headers[name] = value

        if name == "content-disposition":
            _, params = parse_options_header(value.encode("latin-1"))
            raw_name = params.get(b"name")
            if raw_name is not None:
                field_name = raw_name.decode("utf-8")
            raw_filename = params.get(b"filename")
            if raw_filename is not None:
                filename = raw_filename.decode("utf-8")

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return MultipartResult(form=FormData(data), files=tuple(files))
