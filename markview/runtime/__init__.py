"""Terminal runtime: config, input decoding, key bindings, file watching, and the loop."""

from .config import ViewerConfig, load_viewer_config
from .loop import ViewerSession, run_viewer

__all__ = ["ViewerConfig", "ViewerSession", "load_viewer_config", "run_viewer"]
