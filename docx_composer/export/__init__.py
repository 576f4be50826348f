"""Exporters writing composed snapshots back to DOCX packages."""

from .package_writer import PackageWriter

__all__ = ["PackageWriter"]
