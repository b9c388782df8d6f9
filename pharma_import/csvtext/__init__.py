"""CSV text tokenizer and downloadable templates."""

from .template import render_channel_template, render_template, write_template
from .tokenizer import tokenize

__all__ = [
    "tokenize",
    "render_template",
    "render_channel_template",
    "write_template",
]
