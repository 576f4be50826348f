"""Utility helpers for DOCX Composer."""

from .xml_utils import NAMESPACES, qn, local_name, split_qname

__all__ = ["NAMESPACES", "qn", "local_name", "split_qname"]
