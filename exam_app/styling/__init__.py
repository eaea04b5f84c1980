"""Styling module for the ExamDesk console."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
