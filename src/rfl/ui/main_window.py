from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Callable

from PySide6.QtCore import Qt

from rfl.contracts import ActionRequest, ActionResult, ActionType, Notification
from rfl.core import EventBus, make_id
from rfl.ui.charting import ChartAdapter, MatplotlibChartAdapter

if TYPE_CHECKING:
    from rfl.runtime import LineupRuntime


class MainWindowFactory:
    def __init__(self, chart_adapter: ChartAdapter | None = None) -> None:
        self.chart_adapter = chart_adapter or MatplotlibChartAdapter()

    def create(self, action_handler: Callable[[ActionRequest], ActionResult], event_bus: EventBus):
        from PySide6.QtWidgets import (
            QAbstractItemView,
            QComboBox,
            QDialog,
            QGridLayout,
            QHBoxLayout,
            QInputDialog,
            QLabel,
            QLineEdit,
            QListWidget,
            QListWidgetItem,
            QMainWindow,
            QMessageBox,
            QPushButton,
            QSplitter,
            QTextEdit,
            QVBoxLayout,
            QWidget,
        )

        adapter = self.chart_adapter

        def dispatch(action: ActionType, payload: dict[str, Any]) -> ActionResult:
            return action_handler(ActionRequest(make_id("req"), action, payload))

        class PlayerPicker(QDialog):
            def __init__(self, parent: QWidget, slot: int, position: str) -> None:
                super().__init__(parent)
                self.slot = slot
                self.selected_player_id: str | None = None
                self.setWindowTitle(f"Select Player - Position {slot + 1} ({position})")
                self.resize(420, 520)
                layout = QVBoxLayout(self)
                self.search = QLineEdit("")
                self.search.setPlaceholderText("Search players...")
                self.search.textChanged.connect(self._refresh)
                self.players = QListWidget()
                self.players.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
                self.players.itemDoubleClicked.connect(self._choose)
                choose = QPushButton("Select")
                choose.clicked.connect(self._choose)
                layout.addWidget(self.search)
                layout.addWidget(self.players)
                layout.addWidget(choose)
                self._refresh()

            def _refresh(self) -> None:
                result = dispatch(ActionType.LIST_CANDIDATES, {"slot": self.slot, "term": self.search.text()})
                self.players.clear()
                for row in result.data.get("candidates", []):
                    player = row["player"]
                    text = f"{player['name']}  [{player['position']}]  {player['team']}"
                    if row["label"]:
                        text += f"  - {row['label']}"
                    item = QListWidgetItem(text)
                    item.setData(Qt.ItemDataRole.UserRole, player["id"])
                    if not row["selectable"]:
                        item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEnabled)
                    self.players.addItem(item)

            def _choose(self, *_: object) -> None:
                item = self.players.currentItem()
                if item is None:
                    return
                self.selected_player_id = str(item.data(Qt.ItemDataRole.UserRole))
                self.accept()

        class MainWindow(QMainWindow):
            def __init__(self) -> None:
                super().__init__()
                self.setWindowTitle("RFL 90' Lineup Builder")
                self.resize(1280, 820)
                self._chart_widget: QWidget | None = None
                self._board: dict[str, Any] = {}

                self.output = QTextEdit()
                self.output.setReadOnly(True)
                self.output.document().setMaximumBlockCount(500)

                root = QWidget()
                layout = QHBoxLayout(root)
                splitter = QSplitter()
                splitter.setOrientation(Qt.Orientation.Horizontal)
                splitter.addWidget(self._side_panel())
                splitter.addWidget(self._board_panel())
                splitter.setSizes([320, 960])
                layout.addWidget(splitter)
                self.setCentralWidget(root)
                self.statusBar().showMessage("Ready")

                event_bus.subscribe(self._on_notification)
                self._refresh_formations()
                self._refresh_teams()
                self._refresh_saved()
                self._refresh_board()

            def _dispatch(self, action: ActionType, payload: dict[str, Any], *, log: bool = True) -> ActionResult:
                result = dispatch(action, payload)
                if log:
                    state = "OK" if result.success else "FAIL"
                    self.output.append(f"[{state}] {action.value}: {result.message}")
                if "board" in result.data:
                    self._board = result.data["board"]
                    self._render_board()
                return result

            def _on_notification(self, notification: Notification) -> None:
                self.statusBar().showMessage(f"{notification.title}: {notification.description}", 5000)
                if notification.variant in {"warning", "destructive"}:
                    QMessageBox.warning(self, notification.title, notification.description)

            def _side_panel(self):
                w = QWidget()
                layout = QVBoxLayout(w)
                layout.addWidget(QLabel("Pre-fill lineup"))
                self.teams = QListWidget()
                self.teams.itemDoubleClicked.connect(self._prefill)
                shuffle = QPushButton("Shuffle Teams")
                shuffle.clicked.connect(self._refresh_teams)
                prefill = QPushButton("Pre-fill")
                prefill.clicked.connect(self._prefill)
                row = QHBoxLayout()
                row.addWidget(shuffle)
                row.addWidget(prefill)
                layout.addWidget(self.teams)
                layout.addLayout(row)

                layout.addWidget(QLabel("Saved lineups"))
                self.saved = QListWidget()
                self.saved.itemDoubleClicked.connect(self._load_saved)
                load = QPushButton("Load")
                load.clicked.connect(self._load_saved)
                delete = QPushButton("Delete")
                delete.clicked.connect(self._delete_saved)
                saved_row = QHBoxLayout()
                saved_row.addWidget(load)
                saved_row.addWidget(delete)
                layout.addWidget(self.saved)
                layout.addLayout(saved_row)
                layout.addWidget(self.output)
                return w

            def _board_panel(self):
                w = QWidget()
                layout = QVBoxLayout(w)
                controls = QHBoxLayout()
                self.formation = QComboBox()
                self.formation.currentTextChanged.connect(self._on_formation_changed)
                save = QPushButton("Save Lineup")
                save.clicked.connect(self._save)
                clear = QPushButton("Clear")
                clear.clicked.connect(lambda: self._dispatch(ActionType.CLEAR_BOARD, {}))
                controls.addWidget(QLabel("Formation"))
                controls.addWidget(self.formation)
                controls.addStretch(1)
                controls.addWidget(clear)
                controls.addWidget(save)
                self.summary = QLabel("No current formation.")
                self.pitch_host = QWidget()
                self.pitch = QGridLayout(self.pitch_host)
                self.chart_host = QWidget()
                self.chart_layout = QVBoxLayout(self.chart_host)
                layout.addLayout(controls)
                layout.addWidget(self.summary)
                layout.addWidget(self.pitch_host, 3)
                layout.addWidget(self.chart_host, 2)
                return w

            def _refresh_formations(self) -> None:
                result = self._dispatch(ActionType.LIST_FORMATIONS, {}, log=False)
                self.formation.blockSignals(True)
                self.formation.clear()
                for item in result.data.get("formations", []):
                    self.formation.addItem(item["id"])
                idx = self.formation.findText(str(result.data.get("current", "")))
                if idx >= 0:
                    self.formation.setCurrentIndex(idx)
                self.formation.blockSignals(False)

            def _on_formation_changed(self, formation_id: str) -> None:
                if formation_id:
                    self._dispatch(ActionType.SELECT_FORMATION, {"formation_id": formation_id})

            def _refresh_teams(self) -> None:
                result = self._dispatch(ActionType.SUGGEST_TEAMS, {}, log=False)
                self.teams.clear()
                for team in result.data.get("teams", []):
                    item = QListWidgetItem(team["name"])
                    item.setData(Qt.ItemDataRole.UserRole, team["team_id"])
                    self.teams.addItem(item)

            def _refresh_saved(self) -> None:
                result = self._dispatch(ActionType.LIST_LINEUPS, {}, log=False)
                self.saved.clear()
                rows = result.data.get("lineups", [])
                if not rows:
                    placeholder = QListWidgetItem("You have not saved any lineups yet.")
                    placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
                    self.saved.addItem(placeholder)
                for row in rows:
                    item = QListWidgetItem(f"{row['name']}  ({row['formation']} - {row['players']} players)")
                    item.setData(Qt.ItemDataRole.UserRole, row["id"])
                    self.saved.addItem(item)

            def _refresh_board(self) -> None:
                self._dispatch(ActionType.GET_BOARD, {}, log=False)

            def _render_board(self) -> None:
                while self.pitch.count():
                    child = self.pitch.takeAt(0)
                    if child.widget() is not None:
                        child.widget().deleteLater()
                board = self._board
                if not board.get("has_formation"):
                    self.summary.setText(f"No current formation ('{board.get('formation_id')}').")
                    return
                self.summary.setText(
                    f"{board['formation_id']} | {board['filled']} players | {board['state']}"
                    + (" | saved" if board.get("saved") else "")
                )
                rows = list(reversed(board["rows"]))
                width = max(len(row) for row in rows) if rows else 1
                for r, row in enumerate(rows):
                    offset = (width - len(row)) // 2
                    for c, cell in enumerate(row):
                        player = cell["player"]
                        label = f"{cell['display_slot']} {cell['position']}\n" + (player["name"] if player else "+")
                        button = QPushButton(label)
                        button.setMinimumHeight(56)
                        button.clicked.connect(lambda _=False, slot=cell["slot"], pos=cell["position"]: self._pick(slot, pos))
                        if player:
                            button.setToolTip("Right-click to clear")
                            button.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
                            button.customContextMenuRequested.connect(
                                lambda _=None, slot=cell["slot"]: self._dispatch(ActionType.UNASSIGN_PLAYER, {"slot": slot})
                            )
                        self.pitch.addWidget(button, r, offset + c)
                self._render_chart()

            def _render_chart(self) -> None:
                if self._chart_widget is not None:
                    self.chart_layout.removeWidget(self._chart_widget)
                    self._chart_widget.deleteLater()
                    self._chart_widget = None
                labels: list[str] = []
                ratings: list[float] = []
                for row in self._board.get("rows", []):
                    for cell in row:
                        player = cell["player"]
                        if player:
                            labels.append(player["name"])
                            ratings.append(float(player.get("rating") or 0.0))
                if not labels:
                    return
                self._chart_widget = adapter.create_rating_widget("Current XI ratings", labels, ratings)
                self.chart_layout.addWidget(self._chart_widget)

            def _pick(self, slot: int, position: str) -> None:
                picker = PlayerPicker(self, slot, position)
                if picker.exec() == QDialog.DialogCode.Accepted and picker.selected_player_id:
                    self._dispatch(ActionType.ASSIGN_PLAYER, {"slot": slot, "player_id": picker.selected_player_id})

            def _prefill(self, *_: object) -> None:
                item = self.teams.currentItem()
                if item is None:
                    return
                self._dispatch(ActionType.AUTO_FILL, {"team": str(item.data(Qt.ItemDataRole.UserRole))})

            def _save(self) -> None:
                name, ok = QInputDialog.getText(self, "Save Lineup", "Lineup Name", text=self._board.get("lineup_name", ""))
                if not ok:
                    return
                result = self._dispatch(ActionType.SAVE_LINEUP, {"name": name})
                if result.success:
                    self._refresh_saved()
                    self._refresh_board()

            def _selected_saved_id(self) -> str | None:
                item = self.saved.currentItem()
                if item is None or item.data(Qt.ItemDataRole.UserRole) is None:
                    return None
                return str(item.data(Qt.ItemDataRole.UserRole))

            def _load_saved(self, *_: object) -> None:
                lineup_id = self._selected_saved_id()
                if lineup_id is None:
                    return
                result = self._dispatch(ActionType.LOAD_LINEUP, {"lineup_id": lineup_id})
                if result.success:
                    self._refresh_formations()
                    stale = result.data.get("stale_slots", [])
                    if stale:
                        self.output.append(f"Positions no longer matching the roster: {json.dumps([s + 1 for s in stale])}")

            def _delete_saved(self) -> None:
                lineup_id = self._selected_saved_id()
                if lineup_id is None:
                    return
                result = self._dispatch(ActionType.DELETE_LINEUP, {"lineup_id": lineup_id})
                if result.success:
                    self._refresh_saved()

        return MainWindow()


def launch_ui(runtime: LineupRuntime, chart_adapter: ChartAdapter | None = None) -> None:
    from PySide6.QtWidgets import QApplication

    app = QApplication([])
    window = MainWindowFactory(chart_adapter).create(runtime.handle_action, runtime.event_bus)
    window.show()
    app.exec()
