"""
Archive Module
==============

Access to the image entries a slideshow is built from.
"""

from slideshow_video.archive.reader import ArchiveReader

__all__ = ["ArchiveReader"]
