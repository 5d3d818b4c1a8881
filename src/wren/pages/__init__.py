"""Full-page structure guard."""

from wren.pages.guard import MAX_VALIDATION_DEPTH, Page, page, validate_page

__all__ = ["MAX_VALIDATION_DEPTH", "Page", "page", "validate_page"]
