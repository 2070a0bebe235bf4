from jokes_viewer.viewer import FailureKind, JokeViewer, ViewState

__all__ = ["FailureKind", "JokeViewer", "ViewState"]
