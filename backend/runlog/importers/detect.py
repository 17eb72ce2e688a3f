"""Classify an uploaded activity file as TCX, GPX, CSV, FIT or unknown."""

import os
from typing import Union

from runlog.core.constants import UNSUPPORTED_BINARY_EXTENSIONS
from runlog.schemas.imports import FileFormat

SUPPORTED_EXTENSIONS = {
    ".tcx": FileFormat.tcx,
    ".gpx": FileFormat.gpx,
    ".csv": FileFormat.csv,
}

# Generic extensions that say nothing about the layout; content decides
AMBIGUOUS_EXTENSIONS = (".xml", ".txt")

CSV_HEADER_HINTS = ("activity type", "date", "distance")

UNSUPPORTED_MESSAGE = "Unsupported file format. Please use TCX, GPX, or CSV files."
FIT_MESSAGE = (
    "FIT files are not supported. "
    "Please export your activity as TCX or GPX instead."
)


def file_extension(filename: str) -> str:
    """Lower-cased extension including the dot; '' when there is none."""
    name = (filename or "").lower()
    for ext in UNSUPPORTED_BINARY_EXTENSIONS:
        if name.endswith(ext):
            return ext
    return os.path.splitext(name)[1]


def decode_content(content: Union[bytes, str]) -> str:
    """Return file content as text. Raises UnicodeDecodeError for binary data."""
    if isinstance(content, str):
        return content
    return content.decode("utf-8-sig")


def sniff_format(text: str) -> FileFormat:
    trimmed = text.strip()

    if "<TrainingCenterDatabase" in trimmed or "<tcx:" in trimmed:
        return FileFormat.tcx

    if "<gpx" in trimmed or ("<?xml" in trimmed and "<trk" in trimmed):
        return FileFormat.gpx

    first_line = trimmed.split("\n", 1)[0].lower()
    if any(hint in first_line for hint in CSV_HEADER_HINTS):
        return FileFormat.csv

    return FileFormat.unknown


def detect_format(content: Union[bytes, str], filename: str = "") -> FileFormat:
    """Extension wins when recognised; content is sniffed only without one."""
    ext = file_extension(filename)

    if ext in SUPPORTED_EXTENSIONS:
        return SUPPORTED_EXTENSIONS[ext]
    if ext in UNSUPPORTED_BINARY_EXTENSIONS:
        return FileFormat.fit
    if ext and ext not in AMBIGUOUS_EXTENSIONS:
        return FileFormat.unknown

    try:
        text = decode_content(content)
    except UnicodeDecodeError:
        return FileFormat.unknown
    return sniff_format(text)


def unsupported_message(fmt: FileFormat) -> str:
    return FIT_MESSAGE if fmt == FileFormat.fit else UNSUPPORTED_MESSAGE
