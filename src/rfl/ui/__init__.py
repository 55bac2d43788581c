from .charting import ChartAdapter, MatplotlibChartAdapter
from .main_window import MainWindowFactory, launch_ui

__all__ = ["ChartAdapter", "MainWindowFactory", "MatplotlibChartAdapter", "launch_ui"]
