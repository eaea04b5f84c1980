"""Qt stylesheets built from the color palette."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        text = ColorPalette.TEXT.get(theme)
        surface = ColorPalette.SURFACE.get(theme)
        border = ColorPalette.BORDER.get(theme)
        return f"""
            QMainWindow, QWidget {{
                background-color: {surface};
                color: {text};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.SURFACE_ALT.get(theme)};
                border: 1px solid {border};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.HOVER.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.TEXT_MUTED.get(theme)};
            }}
            QLineEdit, QPlainTextEdit, QSpinBox {{
                border: 1px solid {border};
                border-radius: 4px;
                padding: 4px;
            }}
            QTableWidget {{
                border: 1px solid {border};
                gridline-color: {border};
                selection-background-color: {ColorPalette.SELECTION.get(theme)};
                selection-color: {text};
            }}
            QHeaderView::section {{
                background-color: {ColorPalette.SURFACE_ALT.get(theme)};
                border: none;
                border-bottom: 1px solid {border};
                padding: 4px;
            }}
            QGroupBox {{
                border: 1px solid {border};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
            QGroupBox::title {{
                subcontrol-origin: margin;
                left: 10px;
                padding: 0 3px;
            }}
        """

    @staticmethod
    def get_primary_button_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"background-color: {ColorPalette.ACCENT.get(theme)};"
            f" color: {ColorPalette.ACCENT_TEXT.get(theme)};"
            f" border: 1px solid {ColorPalette.ACCENT.get(theme)};"
        )

    @staticmethod
    def get_heading_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_muted_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.TEXT_MUTED.get(theme)};"

    @staticmethod
    def get_outcome_color(passed: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.PASS if passed else ColorPalette.FAIL
        return color.get(theme)
