from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel,
    QDialogButtonBox, QMessageBox, QCheckBox
)

from config_utils import (
    load_app_config, save_app_config, get_headers_to_process,
    CONFIG_KEY_HEADERS_TO_PROCESS,
    CONFIG_KEY_CONFIRM_NO_TOC
)

HEADER_LEVELS = ["1", "2", "3", "4", "5", "6"]

class SettingsDialog(QDialog):
    """Dialog for managing header tool settings."""
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Preferences")
        self.setMinimumWidth(400)

        self.config = load_app_config()

        # Main layout
        layout = QVBoxLayout(self)

        # Form layout for settings
        form_layout = QFormLayout()

        # Header levels to process
        levels_layout = QHBoxLayout()
        self.level_checkboxes = {}
        for level in HEADER_LEVELS:
            checkbox = QCheckBox(f"H{level}")
            self.level_checkboxes[level] = checkbox
            levels_layout.addWidget(checkbox)
        form_layout.addRow(QLabel("Headers to Process:"), levels_layout)

        # No-ToC confirmation
        self.confirm_no_toc_checkbox = QCheckBox("Ask before marking all headers no-toc")
        form_layout.addRow(QLabel(""), self.confirm_no_toc_checkbox)

        layout.addLayout(form_layout)

        # Dialog buttons (OK, Cancel)
        self.button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)
        layout.addWidget(self.button_box)

        self._load_settings()

    def _load_settings(self):
        """Loads current settings into the UI elements."""
        selected = get_headers_to_process(self.config)
        for level, checkbox in self.level_checkboxes.items():
            checkbox.setChecked(level in selected)
        self.confirm_no_toc_checkbox.setChecked(self.config.get(CONFIG_KEY_CONFIRM_NO_TOC, True))

    def _save_settings(self) -> bool:
        """Saves the current UI settings to the configuration file."""
        self.config[CONFIG_KEY_HEADERS_TO_PROCESS] = [
            level for level, checkbox in self.level_checkboxes.items() if checkbox.isChecked()
        ]
        self.config[CONFIG_KEY_CONFIRM_NO_TOC] = self.confirm_no_toc_checkbox.isChecked()

        if save_app_config(self.config):
            return True
        else:
            QMessageBox.warning(self, "Save Error", "Could not save settings to the configuration file.")
            return False

    def accept(self):
        """Handles the OK button click, saving settings before closing."""
        if self._save_settings():
            super().accept()

    @staticmethod
    def get_settings(parent=None):
        """Static method to create, show dialog, and return True if accepted."""
        dialog = SettingsDialog(parent)
        return dialog.exec() == QDialog.DialogCode.Accepted
