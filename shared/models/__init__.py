from .media import MediaItem
from .album import Album
from .face import FaceRecord, image_key, face_key

__all__ = ['MediaItem', 'Album', 'FaceRecord', 'image_key', 'face_key']
