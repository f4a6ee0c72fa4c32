from .batch import ExportBatchOrchestrator
from .clip_exporter import ClipExporter

__all__ = ["ClipExporter", "ExportBatchOrchestrator"]
