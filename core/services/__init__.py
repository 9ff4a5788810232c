from .auth_service import AuthService
from .catalog_service import BookCatalogMirror
from .library_service import LibraryLedger
from .profile_pictures import ProfilePictureStore

__all__ = ['AuthService', 'BookCatalogMirror', 'LibraryLedger', 'ProfilePictureStore']
