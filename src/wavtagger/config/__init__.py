from .tagger_config import TaggerConfig

__all__ = ['TaggerConfig']
