"""Legacy Word (.doc) extraction through the antiword command-line tool."""

import subprocess

from textextract.config import settings
from textextract.core.exceptions import ExtractionError
from textextract.core.logging import get_logger

logger = get_logger(__name__)


class DocExtractor:
    def __init__(self, command: str | None = None):
        self.command = command or settings.antiword_cmd

    def extract(self, file_data: bytes) -> str:
        try:
            # "-" makes antiword read the document from stdin
            completed = subprocess.run(
                [self.command, "-"],
                input=file_data,
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise ExtractionError(f"antiword is not installed ({self.command})") from e

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            logger.error(f"antiword exited with {completed.returncode}: {stderr}")
            raise ExtractionError(f"Could not read DOC document: {stderr or 'antiword failed'}")

        return completed.stdout.decode("utf-8", errors="replace").strip()
