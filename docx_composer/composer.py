"""
High-level composition API.

Loads DOCX packages, normalizes the inputs, folds them into the seed document
and writes the result.

Example:
    from docx_composer import compose_documents

    compose_documents("report.docx", ["ch1.docx", "ch2.docx"], template="cover.docx")
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .exceptions import InvalidArgumentError
from .export.package_writer import PackageWriter
from .merger.composition import fold_all
from .merger.normalize import normalize_snapshot
from .models.snapshot import DocumentSnapshot
from .options import ComposeOptions
from .parser.package_reader import PackageReader
from .parser.snapshot_loader import load_snapshot

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Composer:
    """
    Composes DOCX packages into one.

    Inputs are loaded and normalized independently (in a thread pool unless
    ``max_workers`` is 1); the fold itself runs sequentially in input order.
    """

    def __init__(self, options: Optional[ComposeOptions] = None) -> None:
        self.options = (options or ComposeOptions()).validate()

    def prepare(self, path: PathLike) -> DocumentSnapshot:
        """Load and normalize one input package."""
        with PackageReader(path) as reader:
            snapshot = load_snapshot(reader, source=str(path))
        return normalize_snapshot(snapshot, self.options)

    def load(self, paths: Sequence[PathLike]) -> List[DocumentSnapshot]:
        """
        Load and normalize input packages, preserving input order.
        """
        paths = list(paths)
        if self.options.max_workers == 1 or len(paths) < 2:
            return [self.prepare(path) for path in paths]

        with ThreadPoolExecutor(max_workers=self.options.max_workers) as executor:
            return list(executor.map(self.prepare, paths))

    def compose(self, seed: DocumentSnapshot, inputs: Sequence[DocumentSnapshot]) -> DocumentSnapshot:
        """Fold already loaded inputs into ``seed``."""
        return fold_all(seed, inputs)

    def compose_files(
        self,
        output_path: PathLike,
        inputs: Sequence[PathLike],
        template: Optional[PathLike] = None,
    ) -> Path:
        """
        Compose input packages and write the result.

        Args:
            output_path: Where to write the composed package
            inputs: Input packages, in order
            template: Seed package; the first input is the seed when None

        Returns:
            Path of the written package
        """
        inputs = list(inputs or [])
        if not inputs:
            raise InvalidArgumentError("At least one input document is required")

        if template is None:
            seed_path, rest = inputs[0], inputs[1:]
        else:
            seed_path, rest = template, inputs

        seed_package = PackageReader(seed_path)
        seed = load_snapshot(seed_package, source=str(seed_path))
        logger.info(f"Composing {len(rest)} document(s) into {seed_path}")

        result = self.compose(seed, self.load(rest))
        return PackageWriter(seed_package).save(result, output_path)


def compose_documents(
    output_path: PathLike,
    inputs: Sequence[PathLike],
    template: Optional[PathLike] = None,
    options: Optional[ComposeOptions] = None,
) -> Path:
    """Compose ``inputs`` (in order) into ``output_path``."""
    return Composer(options).compose_files(output_path, inputs, template)
