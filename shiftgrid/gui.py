"""
PySide6 desktop grid for editing a week of shifts.

The widgets only render and forward input: focus, edit state, imports and
exports all go through the ScheduleSession, so the grid behaves exactly
like the engine the CLI and the tests drive.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

from PySide6.QtWidgets import (
    QAbstractItemDelegate,
    QAbstractItemView,
    QApplication,
    QCheckBox,
    QComboBox,
    QDialog,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QStyledItemDelegate,
    QTableView,
    QVBoxLayout,
    QWidget,
)
from PySide6.QtCore import Qt, QAbstractTableModel, QModelIndex, Signal, QThread
from PySide6.QtGui import QBrush, QColor, QDragEnterEvent, QDropEvent

from .csv_export import DATE_RANGES, FORMATS, CSVExportError, ExportOptions, ExportOptionsError, save_export
from .csv_import import ImportResult
from .csv_schema import CSVSchema
from .logging_utils import get_logger, setup_logging
from .models import CellCategory, ShiftKey
from .navigator import Focus, NavCommand
from .session import ScheduleSession
from .week_utils import DAY_NAMES, week_dates

logger = get_logger('gui')

CATEGORY_COLORS = {
    CellCategory.OFF: QColor(244, 204, 204),
    CellCategory.SHIFT: QColor(207, 226, 243),
    CellCategory.EMPTY: QColor(255, 255, 255),
}
EDITING_COLOR = QColor(255, 242, 204)

QT_KEY_NAMES = {
    Qt.Key_Up: 'Up',
    Qt.Key_Down: 'Down',
    Qt.Key_Left: 'Left',
    Qt.Key_Right: 'Right',
    Qt.Key_Tab: 'Tab',
    Qt.Key_Return: 'Return',
    Qt.Key_Enter: 'Enter',
}


class ScheduleTableModel(QAbstractTableModel):
    """
    Table model over a session: column 0 is the employee, columns 1-7 the days.
    """

    def __init__(self, session: ScheduleSession):
        super().__init__()
        self.session = session

    def rowCount(self, parent=QModelIndex()):
        return len(self.session.roster)

    def columnCount(self, parent=QModelIndex()):
        return 1 + len(DAY_NAMES)

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        if section == 0:
            return 'Team Members'
        day = section - 1
        date = week_dates(self.session.week_anchor)[day]
        return f"{DAY_NAMES[day]}\n{date.strftime('%m/%d')}"

    def keyAt(self, index: QModelIndex) -> Optional[ShiftKey]:
        if not index.isValid() or index.column() == 0:
            return None
        employee = self.session.roster.by_index(index.row())
        return ShiftKey(employee.employee_id, index.column() - 1)

    def flags(self, index):
        if not index.isValid():
            return Qt.NoItemFlags
        if index.column() == 0:
            return Qt.ItemIsEnabled
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable | Qt.ItemIsEditable

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None

        employee = self.session.roster.by_index(index.row())
        key = self.keyAt(index)
        edit_session = self.session.edit_session

        if role == Qt.DisplayRole:
            if key is None:
                return f"{employee.initials}  {employee.name}"
            return edit_session.display_text(key)

        if role == Qt.EditRole and key is not None:
            return edit_session.display_text(key)

        if role == Qt.BackgroundRole and key is not None:
            if key == edit_session.editing_key:
                return QBrush(EDITING_COLOR)
            return QBrush(CATEGORY_COLORS[edit_session.display_category(key)])

        if role == Qt.ToolTipRole and key is not None:
            value = edit_session.committed_value(key)
            date = week_dates(self.session.week_anchor)[key.day]
            tip = f"{employee.name} - {DAY_NAMES[key.day]} {date.strftime('%m/%d')}"
            return f"{tip}: {value}" if value else tip

        return None

    def setData(self, index, value, role=Qt.EditRole):
        """Commit the edit in progress; the draft already holds the value."""
        key = self.keyAt(index)
        if key is None or role != Qt.EditRole:
            return False

        edit_session = self.session.edit_session
        if edit_session.editing_key != key:
            return False
        edit_session.type(value)
        edit_session.commit()
        self.dataChanged.emit(index, index)
        return True

    def refresh(self):
        """Re-render every cell and the day headers."""
        self.beginResetModel()
        self.endResetModel()


class ShiftCellDelegate(QStyledItemDelegate):
    """
    Line-edit delegate whose edits run through the session's edit state.
    """

    def __init__(self, session: ScheduleSession, parent=None):
        super().__init__(parent)
        self.session = session

    def createEditor(self, parent, option, index):
        editor = QLineEdit(parent)
        editor.setMaxLength(self.session.config.max_cell_length)
        editor.setPlaceholderText("Enter shift time or OFF")
        editor.textEdited.connect(lambda text: self._onTextEdited(index, text))
        return editor

    def setEditorData(self, editor, index):
        key = index.model().keyAt(index)
        self.session.edit_session.start_edit(key)
        editor.setText(self.session.edit_session.draft)
        editor.selectAll()

    def setModelData(self, editor, model, index):
        model.setData(index, editor.text(), Qt.EditRole)

    def _onTextEdited(self, index, text: str):
        if self.session.edit_session.is_editing:
            self.session.edit_session.type(text)
            index.model().dataChanged.emit(index, index)


class ScheduleTableView(QTableView):
    """
    Table view that routes the keyboard through the session's GridController.
    """

    def __init__(self, session: ScheduleSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.setEditTriggers(QAbstractItemView.DoubleClicked)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setTabKeyNavigation(False)

    @property
    def controller(self):
        return self.session.controller

    def syncFocus(self):
        """Move the current index to the controller's focused cell."""
        focus = self.controller.focus
        index = self.model().index(focus.employee_index, focus.day + 1)
        if index != self.currentIndex():
            self.setCurrentIndex(index)

    def keyPressEvent(self, event):
        key_name = QT_KEY_NAMES.get(event.key())
        if key_name is None or self.state() == QAbstractItemView.EditingState:
            super().keyPressEvent(event)
            return

        self.controller.handle_key(key_name)
        self.syncFocus()
        if self.session.edit_session.is_editing:
            self.edit(self.currentIndex())
        event.accept()

    def focusNextPrevChild(self, next_):
        # Tab moves right within the grid instead of leaving it
        if self.state() != QAbstractItemView.EditingState:
            self.controller.handle(NavCommand.ADVANCE if next_ else NavCommand.LEFT)
            self.syncFocus()
            return True
        return super().focusNextPrevChild(next_)

    def currentChanged(self, current, previous):
        super().currentChanged(current, previous)
        if not current.isValid():
            return
        day = max(0, current.column() - 1)
        if Focus(current.row(), day) != self.controller.focus:
            self.controller.focus_cell(current.row(), day)
            self.viewport().update()
        if current.column() == 0:
            self.syncFocus()

    def closeEditor(self, editor, hint):
        edit_session = self.session.edit_session
        if hint == QAbstractItemDelegate.RevertModelCache:
            self.controller.escape()
        elif edit_session.is_editing:
            # Editor lost focus without committing data
            edit_session.type(editor.text())
            edit_session.commit()

        if hint == QAbstractItemDelegate.EditNextItem:
            self.controller.handle(NavCommand.ADVANCE)
            hint = QAbstractItemDelegate.NoHint
        elif hint == QAbstractItemDelegate.EditPreviousItem:
            self.controller.handle(NavCommand.LEFT)
            hint = QAbstractItemDelegate.NoHint

        super().closeEditor(editor, hint)
        self.syncFocus()
        self.viewport().update()


class FileReadWorker(QThread):
    """
    Worker thread that reads a selected file in full.
    """
    finished = Signal(int, str)
    error = Signal(int, str)

    def __init__(self, ticket: int, file_path: str):
        super().__init__()
        self.ticket = ticket
        self.file_path = file_path

    def run(self):
        """Read the file and emit its text, or the read error."""
        try:
            text = Path(self.file_path).read_text(encoding=CSVSchema.READ_ENCODING)
            self.finished.emit(self.ticket, text)
        except (OSError, UnicodeDecodeError) as e:
            self.error.emit(self.ticket, str(e))


class PreviewTableModel(QAbstractTableModel):
    """Read-only model of staged import rows (header row as table header)."""

    def __init__(self, rows: Optional[List[List[str]]] = None):
        super().__init__()
        self.rows = rows or []

    def rowCount(self, parent=QModelIndex()):
        return max(0, len(self.rows) - 1)

    def columnCount(self, parent=QModelIndex()):
        return max((len(row) for row in self.rows), default=0)

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal and self.rows:
            header = self.rows[0]
            return header[section] if section < len(header) else ''
        return None

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid() or role != Qt.DisplayRole:
            return None
        row = self.rows[index.row() + 1]
        cell = row[index.column()] if index.column() < len(row) else ''
        return cell or '-'

    def setRows(self, rows: List[List[str]]):
        self.beginResetModel()
        self.rows = rows
        self.endResetModel()


class ImportDialog(QDialog):
    """
    Import a CSV file: pick or drop a file, review errors or the preview,
    then confirm.
    """

    def __init__(self, session: ScheduleSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.importer = session.importer
        self.workers: Dict[int, FileReadWorker] = {}
        self.setAcceptDrops(True)
        self.initUI()

    def initUI(self):
        self.setWindowTitle("Import Schedule")
        self.resize(800, 450)

        layout = QVBoxLayout()
        self.setLayout(layout)

        self.drop_label = QLabel(
            "Drag and drop your CSV file here, or choose a file.\n\n"
            "• First column must be \"Name\"\n"
            "• Columns 2-8 should be the days (Saturday through Friday)\n"
            "• Must include all required employees\n"
            "• Use \"OFF\" for days off, or shift times like \"7AM-3PM\""
        )
        self.drop_label.setStyleSheet("border: 2px dashed #999; padding: 16px;")
        layout.addWidget(self.drop_label)

        self.file_label = QLabel("No file selected")
        self.file_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.file_label)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #b00020;")
        self.error_label.setWordWrap(True)
        layout.addWidget(self.error_label)

        self.preview_model = PreviewTableModel()
        self.preview_view = QTableView()
        self.preview_view.setModel(self.preview_model)
        self.preview_view.setEditTriggers(QTableView.NoEditTriggers)
        self.preview_view.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        layout.addWidget(self.preview_view)

        button_layout = QHBoxLayout()

        self.choose_button = QPushButton("Choose File...")
        self.choose_button.clicked.connect(self.openFileDialog)
        button_layout.addWidget(self.choose_button)

        button_layout.addStretch()

        self.back_button = QPushButton("Back")
        self.back_button.clicked.connect(self.discardPreview)
        button_layout.addWidget(self.back_button)

        self.import_button = QPushButton("Import Schedule")
        self.import_button.clicked.connect(self.confirmImport)
        button_layout.addWidget(self.import_button)

        layout.addLayout(button_layout)
        self.showResult(None)

    def openFileDialog(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open CSV File",
            "",
            "CSV Files (*.csv);;All Files (*)"
        )
        if file_path:
            self.loadFile(file_path)

    def loadFile(self, file_path: str):
        """
        Select a file and read it in the background.

        A file selected while another is still being read replaces it.
        """
        ticket = self.importer.select_file(Path(file_path).name)
        self.file_label.setText(f"File: {Path(file_path).name}")
        if ticket is None:
            self.showResult(self.importer.result)
            return

        self.error_label.setText("Reading file...")
        worker = FileReadWorker(ticket, file_path)
        worker.finished.connect(self.onFileRead)
        worker.error.connect(self.onFileReadError)
        self.workers[ticket] = worker
        worker.start()

    def onFileRead(self, ticket: int, text: str):
        self.releaseWorker(ticket)
        result = self.importer.deliver(ticket, text)
        if result is not None:
            self.showResult(result)

    def onFileReadError(self, ticket: int, message: str):
        self.releaseWorker(ticket)
        result = self.importer.deliver_failure(ticket, message)
        if result is not None:
            self.showResult(result)

    def releaseWorker(self, ticket: int):
        """Drop a worker that has reported its result."""
        worker = self.workers.pop(ticket, None)
        if worker is not None:
            # run() returns right after emitting; the thread must end before it is freed
            worker.wait()

    def showResult(self, result: Optional[ImportResult]):
        if result is None:
            self.error_label.setText("")
            self.preview_model.setRows([])
        elif result.ok:
            self.error_label.setText(
                "CSV file validated successfully. Preview the data below before importing."
            )
            self.error_label.setStyleSheet("color: #1b5e20;")
            self.preview_model.setRows(result.rows)
        else:
            self.error_label.setStyleSheet("color: #b00020;")
            self.error_label.setText("\n".join(f"• {m}" for m in result.messages()))
            self.preview_model.setRows([])

        has_preview = bool(self.importer.preview)
        self.import_button.setEnabled(has_preview)
        self.back_button.setEnabled(has_preview)

    def discardPreview(self):
        self.importer.cancel()
        self.file_label.setText("No file selected")
        self.showResult(None)

    def confirmImport(self):
        summary = self.session.confirm_import()
        message = f"Your schedule has been updated with the imported data.\n\n" \
                  f"Rows applied: {summary.rows_applied}\n" \
                  f"Cells written: {summary.cells_written}"
        QMessageBox.information(self, "Import Complete", message)
        self.accept()

    def reject(self):
        self.importer.cancel()
        super().reject()

    def dragEnterEvent(self, event: QDragEnterEvent):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event: QDropEvent):
        urls = event.mimeData().urls()
        if urls:
            self.loadFile(urls[0].toLocalFile())


class ExportDialog(QDialog):
    """Collect export options and save the current week."""

    def __init__(self, session: ScheduleSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.saved_path: Optional[Path] = None
        self.initUI()

    def initUI(self):
        self.setWindowTitle("Export Schedule")

        layout = QVBoxLayout()
        self.setLayout(layout)

        form = QFormLayout()
        self.format_input = QComboBox()
        self.format_input.addItems(list(FORMATS))
        form.addRow("Export format:", self.format_input)

        self.range_input = QComboBox()
        self.range_input.addItems(list(DATE_RANGES))
        form.addRow("Date range:", self.range_input)

        self.header_input = QCheckBox("Add column headers to the exported file")
        self.header_input.setChecked(True)
        form.addRow("Include headers:", self.header_input)

        self.audit_input = QCheckBox("Add change history and timestamps")
        form.addRow("Include audit trail:", self.audit_input)
        layout.addLayout(form)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(self.reject)
        button_layout.addWidget(cancel_button)
        export_button = QPushButton("Export Schedule")
        export_button.clicked.connect(self.runExport)
        button_layout.addWidget(export_button)
        layout.addLayout(button_layout)

    def options(self) -> ExportOptions:
        return ExportOptions(
            format=self.format_input.currentText(),
            include_header=self.header_input.isChecked(),
            include_audit=self.audit_input.isChecked(),
            date_range=self.range_input.currentText(),
        )

    def runExport(self):
        try:
            text = self.session.export(self.options())
        except ExportOptionsError as e:
            QMessageBox.warning(self, "Export Not Available", str(e))
            return

        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Schedule CSV",
            self.session.export_filename(),
            "CSV Files (*.csv);;All Files (*)"
        )
        if not file_path:
            return

        try:
            # The save dialog already asked about overwriting
            self.saved_path = save_export(text, file_path, force=True)
        except CSVExportError as e:
            QMessageBox.critical(self, "Export Failed", str(e))
            return

        QMessageBox.information(
            self, "Export Complete", f"Your schedule has been exported to:\n{self.saved_path}"
        )
        self.accept()


class HistoryDialog(QDialog):
    """Read-only list of the session's changes."""

    def __init__(self, session: ScheduleSession, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Schedule History")
        self.resize(700, 400)

        layout = QVBoxLayout()
        self.setLayout(layout)

        text = QPlainTextEdit()
        text.setReadOnly(True)
        text.setPlainText(session.history.format_history())
        layout.addWidget(text)

        close_button = QPushButton("Close")
        close_button.clicked.connect(self.accept)
        layout.addWidget(close_button)


class ScheduleWindow(QMainWindow):
    """
    Main window: week toolbar above the shift grid.
    """

    def __init__(self, session: Optional[ScheduleSession] = None):
        super().__init__()
        self.session = session or ScheduleSession()
        self.initUI()

    def initUI(self):
        """Initialize the user interface."""
        self.setWindowTitle("Team Schedule")
        self.setGeometry(100, 100, 1200, 520)
        self.setAcceptDrops(True)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout()
        central_widget.setLayout(layout)

        toolbar = QHBoxLayout()

        prev_button = QPushButton("◀")
        prev_button.clicked.connect(lambda: self.changeWeek(self.session.previous_week))
        toolbar.addWidget(prev_button)

        self.week_button = QPushButton(self.session.week_label)
        self.week_button.setToolTip("Go to the current week")
        self.week_button.setStyleSheet("font-size: 14px; font-weight: bold;")
        self.week_button.clicked.connect(lambda: self.changeWeek(self.session.current_week))
        toolbar.addWidget(self.week_button)

        next_button = QPushButton("▶")
        next_button.clicked.connect(lambda: self.changeWeek(self.session.next_week))
        toolbar.addWidget(next_button)

        toolbar.addStretch()

        new_week_button = QPushButton("New Week")
        new_week_button.clicked.connect(self.createNewWeek)
        toolbar.addWidget(new_week_button)

        import_button = QPushButton("Import")
        import_button.clicked.connect(lambda: self.openImportDialog())
        toolbar.addWidget(import_button)

        export_button = QPushButton("Export")
        export_button.clicked.connect(self.openExportDialog)
        toolbar.addWidget(export_button)

        history_button = QPushButton("History")
        history_button.clicked.connect(lambda: HistoryDialog(self.session, self).exec())
        toolbar.addWidget(history_button)

        layout.addLayout(toolbar)

        self.table_model = ScheduleTableModel(self.session)
        self.table_view = ScheduleTableView(self.session)
        self.table_view.setModel(self.table_model)
        self.table_view.setItemDelegate(ShiftCellDelegate(self.session, self.table_view))
        self.table_view.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table_view.verticalHeader().setVisible(False)
        layout.addWidget(self.table_view)

        footer = QLabel(
            "Double-click or press Enter to edit • Use arrow keys to navigate • Tab to move right"
        )
        footer.setAlignment(Qt.AlignCenter)
        footer.setStyleSheet("color: #666;")
        layout.addWidget(footer)

        self.table_view.syncFocus()

    def refresh(self):
        self.week_button.setText(self.session.week_label)
        self.table_model.refresh()
        self.table_view.syncFocus()

    def changeWeek(self, move):
        move()
        self.refresh()

    def createNewWeek(self):
        reply = QMessageBox.question(
            self,
            "New Week",
            "Start an empty schedule for the following week?\n\n"
            "Shifts of the visible week are not kept.",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No
        )
        if reply == QMessageBox.Yes:
            self.changeWeek(self.session.new_week)

    def openImportDialog(self, file_path: Optional[str] = None):
        self.session.edit_session.commit()
        dialog = ImportDialog(self.session, self)
        if file_path:
            dialog.loadFile(file_path)
        dialog.exec()
        self.refresh()

    def openExportDialog(self):
        self.session.edit_session.commit()
        self.refresh()
        ExportDialog(self.session, self).exec()

    def dragEnterEvent(self, event: QDragEnterEvent):
        """Handle drag enter event for drag-and-drop."""
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event: QDropEvent):
        """Handle drop event for drag-and-drop."""
        urls = event.mimeData().urls()
        if urls:
            self.openImportDialog(urls[0].toLocalFile())

    def closeEvent(self, event):
        self.session.close()
        super().closeEvent(event)


def main(csv_path: Optional[str] = None) -> int:
    """
    Main entry point for the GUI application.

    Args:
        csv_path: Optional CSV file to import on startup

    Returns:
        Application exit code
    """
    app = QApplication.instance() or QApplication(sys.argv)
    window = ScheduleWindow()
    window.show()

    if csv_path:
        window.openImportDialog(csv_path)

    return app.exec()


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Weekly shift grid')
    parser.add_argument('csv', nargs='?', help='CSV file to import on startup')
    args = parser.parse_args()

    setup_logging()
    sys.exit(main(args.csv))
