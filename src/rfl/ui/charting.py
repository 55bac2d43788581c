from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, cast

if TYPE_CHECKING:
    from PySide6.QtWidgets import QWidget


class ChartAdapter(Protocol):
    def create_rating_widget(self, title: str, labels: list[str], ratings: list[float]) -> QWidget: ...


@dataclass(slots=True)
class MatplotlibChartAdapter:
    """Matplotlib-in-Qt adapter; swappable behind ChartAdapter contract."""

    def create_rating_widget(self, title: str, labels: list[str], ratings: list[float]) -> QWidget:
        from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg
        from matplotlib.figure import Figure

        fig = Figure(figsize=(4.5, 2.4), dpi=100)
        ax = fig.add_subplot(111)
        ax.bar(labels, ratings, color="#2f9e44")
        ax.set_title(title)
        ax.set_ylim(0, 100)
        ax.tick_params(axis="x", labelrotation=45, labelsize=7)
        ax.grid(axis="y", alpha=0.3)
        fig.tight_layout()
        canvas = FigureCanvasQTAgg(fig)
        return cast("QWidget", canvas)
