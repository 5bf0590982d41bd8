"""
Flat-file JSON store.

The whole document is read into memory on every access and the whole
snapshot is written back on every mutation. Writes go to a temporary file
in the same directory followed by ``os.replace`` so a crash leaves either
the previous or the new snapshot on disk, never a partial one.

There is no locking: two concurrent read-modify-write cycles can interleave
and the last writer wins.
"""
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator

from pydantic import ValidationError

from rentalhq.models.records import AppData

logger = logging.getLogger(__name__)


class JsonStore:
    def __init__(self, path: str):
        self.path = path

    def read(self) -> AppData:
        """Load the snapshot. A missing or corrupt file yields empty collections."""
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                raw = json.load(fh)
            return AppData.model_validate(raw)
        except (OSError, ValueError, ValidationError) as e:
            logger.error("Error reading data file %s: %s", self.path, e)
            return AppData()

    def write(self, data: AppData) -> None:
        """Replace the document with ``data``. Failures are logged, not raised."""
        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.data-', suffix='.json')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                    json.dump(data.to_json(), fh, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error("Error writing data file %s: %s", self.path, e)

    @contextmanager
    def mutate(self) -> Iterator[AppData]:
        """Read-modify-write block. The snapshot is only written if the block exits cleanly."""
        data = self.read()
        yield data
        self.write(data)
