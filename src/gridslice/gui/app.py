"""
Entry point for the PySide6 GUI.
"""
import sys


def run():
    """
    Main entry point for the GUI application.
    """
    from PySide6.QtWidgets import QApplication, QMessageBox

    from gridslice.gui.main_window import MainWindow
    from gridslice.gui.models.settings import SettingsStore
    from gridslice.gui.utils.paths import ensure_directories, get_settings_path

    app = QApplication(sys.argv)
    app.setApplicationName("GridSlice")
    app.setApplicationDisplayName("GridSlice")
    app.setOrganizationName("GridSlice")

    ensure_directories()
    settings = SettingsStore(get_settings_path())
    if settings.load_error:
        QMessageBox.warning(
            None,
            "Settings Reset",
            f"{settings.load_error}\n\nDefault settings will be used.",
        )

    window = MainWindow(settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
