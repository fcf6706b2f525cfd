"""Resolve fixture paths to responses."""

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from mockapi.core.encoder import recognized_extension
from mockapi.errors import FixtureDecodeError, FixtureNotFound
from mockapi.models import FixtureDocument, ResponseDescriptor
from mockapi.utils.constants import (
    DEFAULT_EXTENSION,
    FULL_DESCRIPTOR_SUFFIX,
    SIMPLE_MEDIA_TYPES,
)


def split_fixture_path(fixture_path: str) -> tuple[str, str | None]:
    """Split an encoded path into its base and the extension the encoder chose."""
    extension = recognized_extension(fixture_path)
    if extension is None:
        return fixture_path, None
    return fixture_path[: -len(extension)], extension


def descriptor_path(fixture_path: str) -> str:
    """Path of the full-descriptor record for an encoded path.

    Paths ending in the default extension swap it for the record suffix
    (``items/42.json`` -> ``items/42.response.json``). Any other extension
    is kept (``report.csv`` -> ``report.csv.response.json``), so sibling
    requests such as ``report.csv`` and ``report.txt`` get separate records.
    """
    base, extension = split_fixture_path(fixture_path)
    if extension == DEFAULT_EXTENSION:
        return base + FULL_DESCRIPTOR_SUFFIX
    return fixture_path + FULL_DESCRIPTOR_SUFFIX


def candidate_paths(fixture_path: str) -> list[str]:
    """Relative paths to probe for a fixture, in resolution order.

    The encoded path comes first, then the same base with the other simple
    media type extensions, then the full-descriptor record.
    """
    base, implied = split_fixture_path(fixture_path)
    candidates = []
    if implied:
        candidates.append(fixture_path)

    for extension in SIMPLE_MEDIA_TYPES:
        if base + extension != fixture_path:
            candidates.append(base + extension)

    candidates.append(descriptor_path(fixture_path))
    return candidates


def media_type_for(path: Path) -> str:
    """Content type implied by a simple fixture's extension."""
    return SIMPLE_MEDIA_TYPES.get(path.suffix.lower(), "application/octet-stream")


class FixtureLoader:
    """Loads simplified and full-descriptor fixtures from mock roots."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)

    def load(self, root: str | Path, fixture_path: str) -> ResponseDescriptor:
        """Load the fixture for ``fixture_path`` under a single mock root.

        Args:
            root: Mock root directory
            fixture_path: Path produced by the encoder

        Returns:
            The stored response

        Raises:
            FixtureNotFound: If no candidate file exists
            FixtureDecodeError: If a fixture file cannot be read or parsed
        """
        root = Path(root)
        candidates = candidate_paths(fixture_path)
        descriptor = descriptor_path(fixture_path)

        for candidate in candidates:
            file_path = root / candidate
            if not file_path.is_file():
                continue

            self.logger.debug(f"Resolved {fixture_path} to {file_path}")
            if candidate == descriptor:
                return self._load_full_descriptor(file_path)
            return self._load_simplified(file_path)

        raise FixtureNotFound(fixture_path, candidates)

    def find(
        self, roots: Iterable[str | Path], fixture_path: str
    ) -> ResponseDescriptor:
        """Load a fixture from the first root that has one.

        Raises:
            FixtureNotFound: If no root holds a candidate file
        """
        for root in roots:
            try:
                return self.load(root, fixture_path)
            except FixtureNotFound:
                continue

        raise FixtureNotFound(fixture_path, candidate_paths(fixture_path))

    def _load_simplified(self, file_path: Path) -> ResponseDescriptor:
        return ResponseDescriptor(
            status=200,
            headers={"Content-Type": media_type_for(file_path)},
            body=_read(file_path),
        )

    def _load_full_descriptor(self, file_path: Path) -> ResponseDescriptor:
        try:
            document = FixtureDocument.model_validate_json(_read(file_path))
            return document.to_descriptor()
        except (ValidationError, ValueError) as e:
            raise FixtureDecodeError(str(file_path), str(e)) from e


def _read(file_path: Path) -> bytes:
    try:
        return file_path.read_bytes()
    except OSError as e:
        raise FixtureDecodeError(str(file_path), f"unreadable: {e}") from e
