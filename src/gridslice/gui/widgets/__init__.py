from .console_widget import ConsoleWidget
from .grid_editor import GridEditorWidget
from .slice_preview import SlicePreviewPanel

__all__ = ["ConsoleWidget", "GridEditorWidget", "SlicePreviewPanel"]
