"""
main.py

This module defines the main window for the header tools editor: an HTML
editor with commands that add IDs to headers, mark headers as excluded from
the Table of Contents, and insert a nested ToC at the cursor.

The header logic lives in header_commands.py; this module only reads the
settings, hands the editor text to the commands and applies their results.
"""
import logging
import sys
import textwrap

from PyQt6.QtGui import QAction, QKeySequence, QFont, QColor, QPalette
from PyQt6.QtWidgets import QApplication, QMainWindow, QMessageBox
from PyQt6.Qsci import QsciLexerHTML, QsciScintilla

from config_utils import load_app_config, get_headers_to_process, CONFIG_KEY_CONFIRM_NO_TOC
from header_commands import (
    run_add_ids, run_mark_no_toc, run_insert_toc,
    STATUS_SUCCESS, STATUS_ERROR
)
from settings_dialog import SettingsDialog

logger = logging.getLogger(__name__)


class HtmlEditor(QsciScintilla):
    """
    A QsciScintilla widget set up for editing HTML with a dark theme.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._configure_editor()

    def _configure_editor(self):
        """Sets up the editor's appearance and behavior."""
        lexer = QsciLexerHTML()
        lexer.setDefaultFont(QFont("Fira Mono", 12))
        lexer.setDefaultColor(QColor("#d7dae0"))
        lexer.setDefaultPaper(QColor("#282c34"))
        lexer.setPaper(QColor("#282c34"))
        self.setLexer(lexer)
        self.setUtf8(True)

        # Margins and Caret
        self.setMarginsBackgroundColor(QColor("#21252b"))
        self.setMarginsForegroundColor(QColor("#61AFEF")) # Line numbers color
        self.setMarginLineNumbers(0, True)
        self.setMarginWidth(0, "00000")
        self.setCaretForegroundColor(QColor("#61AFEF"))
        self.setCaretLineVisible(True)
        self.setCaretLineBackgroundColor(QColor("#2c313a"))

        # Indentation and Tabs
        self.setAutoIndent(True)
        self.setTabWidth(4)
        self.setIndentationsUseTabs(False)

    def cursor_offset(self) -> int:
        """
        Returns the cursor position as a character offset into text().

        QScintilla reports the column as a byte index into the UTF-8 line,
        so the line prefix is decoded to count characters.
        """
        line, index = self.getCursorPosition()
        offset = sum(len(self.text(i)) for i in range(line))
        prefix = self.text(line).encode("utf-8")[:index]
        return offset + len(prefix.decode("utf-8", errors="ignore"))

    def replace_all_text(self, text: str):
        """Replaces the document as a single undoable step, keeping the cursor line."""
        line, index = self.getCursorPosition()
        self.beginUndoAction()
        self.selectAll()
        self.replaceSelectedText(text)
        self.endUndoAction()
        self.setCursorPosition(line, index)


class MainWindow(QMainWindow):
    """
    The main window: an HTML editor plus a Tools menu with the header commands.
    """
    MENUBAR_STYLESHEET = textwrap.dedent("""
        QMenuBar {
            background: #23252b;
            color: #61AFEF;
            font-size: 14px;
        }
        QMenuBar::item:selected {
            background: #2c313a;
            color: #98c379;
        }
        QMenu {
            background: #23252b;
            color: #d7dae0;
            border: 1px solid #282c34;
        }
        QMenu::item:selected {
            background: #2c313a;
            color: #98c379;
        }
    """)

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Header Tools - HTML Header IDs & Table of Contents")
        self.resize(1000, 700)

        self.editor = HtmlEditor(self)
        self.setCentralWidget(self.editor)
        self.header_actions: list[QAction] = []

        palette = QPalette()
        palette.setColor(QPalette.ColorRole.Window, QColor("#282c34"))
        palette.setColor(QPalette.ColorRole.WindowText, QColor("#d7dae0"))
        self.setPalette(palette)

        self._create_menus()
        self.statusBar().showMessage("Ready", 3000)

    def _create_menus(self):
        menubar = self.menuBar()
        menubar.setStyleSheet(self.MENUBAR_STYLESHEET)

        # --- File Menu ---
        file_menu = menubar.addMenu("&File")
        settings_action = QAction("Preferences...", self)
        settings_action.triggered.connect(self.open_settings)
        file_menu.addAction(settings_action)
        file_menu.addSeparator()
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # --- Tools Menu ---
        tools_menu = menubar.addMenu("Tools")

        add_ids_action = QAction("Add Header IDs", self)
        add_ids_action.setShortcut(QKeySequence("Ctrl+Alt+I"))
        add_ids_action.triggered.connect(self.add_header_ids)
        tools_menu.addAction(add_ids_action)

        no_toc_action = QAction("Mark Headers No-ToC", self)
        no_toc_action.triggered.connect(self.mark_headers_no_toc)
        tools_menu.addAction(no_toc_action)

        tools_menu.addSeparator()

        toc_action = QAction("Insert Table of Contents", self)
        toc_action.setShortcut(QKeySequence("Ctrl+Alt+T"))
        toc_action.triggered.connect(self.insert_table_of_contents)
        tools_menu.addAction(toc_action)

        self.header_actions = [add_ids_action, no_toc_action, toc_action]

    def _headers_to_process(self) -> list[str]:
        return get_headers_to_process(load_app_config())

    def _set_header_actions_enabled(self, enabled: bool):
        for action in self.header_actions:
            action.setEnabled(enabled)

    def _run_header_command(self, command, *args):
        """
        Runs a header command against the current editor text and applies the
        result. Commands are disabled while the edit is applied.
        """
        text = self.editor.text()
        self._set_header_actions_enabled(False)
        try:
            result = command(text, self._headers_to_process(), *args)
            if result.status == STATUS_SUCCESS:
                if self.editor.text() != text:
                    logger.error("Document changed while the header command was running.")
                    QMessageBox.critical(self, "Header Tools", "The document changed; no edits were applied.")
                    return
                self.editor.replace_all_text(result.text)
                self.statusBar().showMessage(result.message, 3000)
                QMessageBox.information(self, "Header Tools", result.message)
            elif result.status == STATUS_ERROR:
                QMessageBox.critical(self, "Header Tools", result.message)
            else:
                self.statusBar().showMessage(result.message, 3000)
                QMessageBox.information(self, "Header Tools", result.message)
        finally:
            self._set_header_actions_enabled(True)

    def add_header_ids(self):
        """Adds id attributes to every configured header that lacks one."""
        self._run_header_command(run_add_ids)

    def mark_headers_no_toc(self):
        """Adds the no-toc class to every configured header, after confirmation."""
        if load_app_config().get(CONFIG_KEY_CONFIRM_NO_TOC, True):
            reply = QMessageBox.question(
                self, "Mark Headers No-ToC",
                "This adds the no-toc class to every matching header in the document. Continue?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
            )
            if reply != QMessageBox.StandardButton.Yes:
                self.statusBar().showMessage("Marking cancelled.", 3000)
                return
        self._run_header_command(run_mark_no_toc)

    def insert_table_of_contents(self):
        """Inserts a nested ToC of the headers with IDs at the cursor."""
        self._run_header_command(run_insert_toc, self.editor.cursor_offset())

    def open_settings(self):
        if SettingsDialog.get_settings(self):
            self.statusBar().showMessage("Settings saved.", 3000)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
