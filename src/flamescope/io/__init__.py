"""Image and metadata export."""

from flamescope.io.exporter import SnapshotExporter

__all__ = ["SnapshotExporter"]
