"""Translation memory persistence."""

from modforge.storage.translation_memory import TranslationMemory

__all__ = ["TranslationMemory"]
