"""
Package reader for DOCX files.

Reads a DOCX (zip) package into memory and exposes its parts by name.
"""

import logging
import zipfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class PackageReader:
    """
    Reads and holds DOCX package contents.

    Parts are read eagerly so that the archive can be closed right away and the
    reader can be shared between threads.
    """

    def __init__(self, docx_path: Union[str, Path]):
        """
        Initialize package reader.

        Args:
            docx_path: Path to DOCX file

        Raises:
            FileNotFoundError: If the file does not exist
            zipfile.BadZipFile: If the file is not a zip archive
        """
        self.docx_path = Path(docx_path)
        self._parts: Dict[str, bytes] = {}
        self._open_package()

    def _open_package(self) -> None:
        """Open DOCX package and read all parts."""
        if not self.docx_path.exists():
            raise FileNotFoundError(f"DOCX file not found: {self.docx_path}")

        with zipfile.ZipFile(self.docx_path, "r") as zip_file:
            for file_info in zip_file.infolist():
                if not file_info.is_dir():
                    self._parts[file_info.filename] = zip_file.read(file_info.filename)

        logger.info(f"Opened DOCX package: {self.docx_path} ({len(self._parts)} parts)")

    @classmethod
    def from_parts(cls, parts: Mapping[str, bytes], name: str = "<memory>") -> "PackageReader":
        """Build a reader over in-memory parts (part name -> bytes)."""
        reader = cls.__new__(cls)
        reader.docx_path = Path(name)
        reader._parts = dict(parts)
        return reader

    @property
    def name(self) -> str:
        return str(self.docx_path)

    def read(self, part_name: str) -> Optional[bytes]:
        """
        Get part content.

        Args:
            part_name: Part name inside the package (``word/document.xml``)

        Returns:
            Part bytes or None if the package has no such part
        """
        return self._parts.get(part_name.lstrip("/"))

    def has_part(self, part_name: str) -> bool:
        return part_name.lstrip("/") in self._parts

    def names(self) -> List[str]:
        return list(self._parts)

    def parts(self) -> Dict[str, bytes]:
        return dict(self._parts)

    def __enter__(self) -> "PackageReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._parts.clear()
