from .visualizer import ModelVisualizer

__all__ = ["ModelVisualizer"]
