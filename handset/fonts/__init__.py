"""Font metrics provider and font source helpers."""

from .metrics import clear_font_cache, extract_font_metrics, google_fonts_css_url, units_per_em

__all__ = ['extract_font_metrics', 'google_fonts_css_url', 'units_per_em', 'clear_font_cache']
