"""Patchers that publish new ByteBuffer generations."""

from modforge.patching.subfiles import SubFileExtractor, SubFileReplacer
from modforge.patching.text import TextPatcher

__all__ = ["SubFileExtractor", "SubFileReplacer", "TextPatcher"]
