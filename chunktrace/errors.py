"""Exceptions raised while turning scene descriptions into scenes."""


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass
