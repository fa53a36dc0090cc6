"""
seolens Content Extraction Module

Turns a CMS document body (HTML string or component array) into plain text
plus heading, paragraph and image counts.
"""

from .markup_extractor import MarkupExtractor, body_markup, render_elements

__all__ = [
    "MarkupExtractor",
    "body_markup",
    "render_elements",
]
