import logging
import subprocess
from typing import Callable

logger = logging.getLogger(__name__)

# (archive path, destination directory) -> exit status
Extractor = Callable[[str, str], int]

COMMAND_NOT_FOUND = 127


class TarExtractor:
    """Unpacks a gzipped layer archive with the system tar binary."""

    def __init__(self, executable: str = "tar", verbose: bool = False):
        self.executable = executable
        self.verbose = verbose

    def command(self, archive: str, destination: str) -> list[str]:
        flags = "-xvzf" if self.verbose else "-xzf"
        return [self.executable, flags, archive, "-C", destination]

    def __call__(self, archive: str, destination: str) -> int:
        args = self.command(archive, destination)
        logger.debug(f"Running {' '.join(args)}")
        try:
            result = subprocess.run(
                args, shell=False, stdout=subprocess.PIPE, stderr=subprocess.PIPE
            )
        except FileNotFoundError:
            logger.error(f"{self.executable} not found")
            return COMMAND_NOT_FOUND

        if self.verbose and result.stdout:
            for line in result.stdout.decode("utf-8", errors="replace").splitlines():
                logger.info(line)
        if result.returncode != 0:
            error_message = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error(f"tar exited with {result.returncode}: {error_message}")
        return result.returncode
