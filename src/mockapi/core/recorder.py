"""Persist live responses as fixtures."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from mockapi.core.encoder import encode
from mockapi.core.loader import descriptor_path, split_fixture_path
from mockapi.errors import RecordWriteError
from mockapi.models import FixtureDocument, RequestDescriptor, ResponseDescriptor
from mockapi.utils.constants import DEFAULT_REDACTED_HEADERS, MEDIA_TYPE_EXTENSIONS


class ResponseRecorder:
    """Writes captured responses under the first writable mock root."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)

    def record(
        self,
        roots: Iterable[str | Path],
        request: RequestDescriptor,
        response: ResponseDescriptor,
        simplify: bool = True,
        overwrite: bool = True,
        redact_headers: Iterable[str] = DEFAULT_REDACTED_HEADERS,
    ) -> Path:
        """Record a response as the fixture for ``request``.

        A 200 response whose media type matches the extension of the
        encoded path is written there as its raw body when ``simplify`` is
        set. Anything else is written as a full descriptor record. Only the
        two files owned by this request are touched: the encoded path and
        its record. A simplified fixture keeps the media type but not
        parameters such as ``charset``; loading it back reports the bare
        media type for its extension.

        Args:
            roots: Ordered mock roots, the first writable one is used
            request: Request the fixture path is derived from
            response: Response to persist
            simplify: Whether the raw-body form may be used
            overwrite: Whether an existing fixture may be replaced
            redact_headers: Header names dropped before writing

        Returns:
            Path of the fixture file

        Raises:
            RecordWriteError: If no root is writable or the write fails
        """
        root = self.select_root(roots)
        fixture_path = encode(request)
        record_path = descriptor_path(fixture_path)
        response = redact(response, redact_headers)

        _, implied = split_fixture_path(fixture_path)
        extension = MEDIA_TYPE_EXTENSIONS.get(response.media_type or "")
        simple = implied is not None and extension == implied.lower()
        if simplify and response.status == 200 and simple:
            target, stale = root / fixture_path, root / record_path
            content = response.body
        else:
            target, stale = root / record_path, root / fixture_path
            document = FixtureDocument.from_descriptor(response)
            content = document.model_dump_json(indent=2).encode("utf-8")

        existing = next((p for p in (target, stale) if p.is_file()), None)
        if existing is not None and not overwrite:
            self.logger.warning(f"Fixture {existing} exists, not overwriting")
            return existing

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
            if stale.is_file():
                stale.unlink()
        except OSError as e:
            self.logger.error(f"Could not write fixture {target}: {e}")
            raise RecordWriteError(f"Could not write fixture {target}: {e}") from e

        self.logger.info(f"Recorded {request.method} {request.url} to {target}")
        return target

    def select_root(self, roots: Iterable[str | Path]) -> Path:
        """Pick the recording target: first existing writable root, else the
        first one that can be created.

        Raises:
            RecordWriteError: If no root qualifies
        """
        paths = [Path(root) for root in roots]

        for root in paths:
            if root.is_dir() and os.access(root, os.W_OK):
                return root

        for root in paths:
            if root.exists():
                continue
            try:
                root.mkdir(parents=True, exist_ok=True)
                return root
            except OSError as e:
                self.logger.warning(f"Could not create mock root {root}: {e}")

        raise RecordWriteError(
            f"No writable mock root among: {[str(root) for root in paths]}"
        )


def redact(
    response: ResponseDescriptor, header_names: Iterable[str]
) -> ResponseDescriptor:
    """Return a copy of ``response`` without the named headers."""
    drop = {name.lower() for name in header_names}
    if not drop & response.headers.keys():
        return response
    return ResponseDescriptor(
        status=response.status,
        headers={k: v for k, v in response.headers.items() if k not in drop},
        body=response.body,
    )

