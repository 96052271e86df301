# src/cro_auditor/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and project paths.
    """

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the installed 'cro_auditor' package."""
        return Path(__file__).resolve().parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    @staticmethod
    def get_export_dir() -> Path:
        """
        Returns the directory for batch exports, created on demand in the current working directory.
        (e.g., ./cro_exports)
        """
        path = Path.cwd() / "cro_exports"
        path.mkdir(parents=True, exist_ok=True)
        return path
