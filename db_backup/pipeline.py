"""
Post-processing of a finished dump: gzip, upload, local cleanup.
"""

import gzip
import logging
from pathlib import Path
from typing import Optional

from .exceptions import CompressionError, UploadError
from .models import UploadResult
from .progress import ProgressReporter
from .storage import S3Storage


class ArtifactPipeline:
    """
    Compresses a finished dump and uploads it to object storage.

    Cleanup rules:
    - the uncompressed file is removed once the .gz copy is complete;
    - after a successful upload the .gz copy is removed, but an
      uncompressed dump stays on disk;
    - after a failed upload nothing is removed.

    Without a storage client the pipeline stops after compression.
    """

    COMPRESSION_LEVEL = 9
    CHUNK_SIZE = 1024 * 256

    def __init__(
        self,
        storage: Optional[S3Storage],
        bucket: Optional[str],
        reporter: ProgressReporter,
        key_prefix: Optional[str] = None
    ):
        self.storage = storage
        self.bucket = bucket
        self.reporter = reporter
        self.key_prefix = key_prefix

    def finalize(self, artifact_path: Path, compress: bool) -> UploadResult:
        """Compress (optionally) and upload ``artifact_path``. Never raises."""
        path = Path(artifact_path)
        if compress:
            try:
                path = self.compress(path)
            except CompressionError as e:
                self.reporter.error(f"Error gzipping backup file: {e}")
                return UploadResult(success=False, local_path=Path(artifact_path), error=str(e))
        else:
            self.reporter.report(f"Backup file successfully saved to {path}", 1, 1)

        if self.storage is None:
            return UploadResult(success=True, local_path=path)

        key = self.object_key(path)
        try:
            with open(path, 'rb') as body:
                url = self.storage.put_object(self.bucket, key, body)
        except (UploadError, OSError) as e:
            self.reporter.error(f"Error uploading backup file to S3: {e}")
            return UploadResult(success=False, key=key, local_path=path, error=str(e))

        self.reporter.report(f"Backup file successfully saved to S3: {url}", 1, 1)

        if compress:
            self._remove(path)
            return UploadResult(success=True, key=key, url=url)
        return UploadResult(success=True, key=key, url=url, local_path=path)

    def compress(self, source: Path) -> Path:
        """Gzip ``source`` to ``<source>.gz`` in fixed-size chunks and remove the source."""
        dest = source.with_name(source.name + '.gz')
        self.reporter.report(f"Gzipping backup file to {dest}... ", 1, 0)

        try:
            with open(source, 'rb') as fp_in, \
                    gzip.open(dest, 'wb', compresslevel=self.COMPRESSION_LEVEL) as fp_out:
                while True:
                    chunk = fp_in.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    fp_out.write(chunk)
        except OSError as e:
            dest.unlink(missing_ok=True)
            raise CompressionError(f"Failed to compress {source}: {e}") from e

        try:
            source.unlink()
        except OSError as e:
            raise CompressionError(f"Compressed but could not remove {source}: {e}") from e

        self.reporter.report("OK")
        return dest

    def object_key(self, path: Path) -> str:
        """Remote key: ``<prefix>/<file name>``, prefix defaulting to the dump directory name."""
        prefix = self.key_prefix if self.key_prefix is not None else path.parent.name
        prefix = prefix.strip('/')
        return f"{prefix}/{path.name}" if prefix else path.name

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink()
            logging.debug(f"Removed local artifact {path}")
        except OSError as e:
            logging.warning(f"Could not remove local artifact {path}: {e}")
