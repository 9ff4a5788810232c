# core/catalog/transform.py
from typing import Any, Dict, List, Optional

from core.exceptions import CatalogError
from core.sa.models import IMAGE_VARIANTS

UNKNOWN_AUTHOR = 'Unknown author'
UNKNOWN_PUBLISHER = 'Unknown publisher'
NO_DESCRIPTION = 'No description available'
UNCATEGORIZED = 'Uncategorized'
NOT_AVAILABLE = 'N/A'
UNTITLED = 'Untitled'


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any, default: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _text_list(value: Any, default: str) -> List[str]:
    # A lone string is treated as a one-element list
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return [default]
    items = [item for item in value if isinstance(item, str) and item.strip()]
    return items or [default]


def _extract_isbn13(identifiers: Any) -> str:
    if not isinstance(identifiers, list):
        return NOT_AVAILABLE
    for identifier in identifiers:
        if not isinstance(identifier, dict):
            continue
        if identifier.get('type') == 'ISBN_13' and _text(identifier.get('identifier'), None):
            return identifier['identifier']
    return NOT_AVAILABLE


def _page_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return count if count > 0 else 0


def transform_google_book(data: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a Google Books volume into the column values of a Book row.

    Missing or mistyped fields are replaced by fixed placeholders so every
    mirrored book has the same shape.

    Args:
        data: A volume resource as returned by the catalog

    Returns:
        Dictionary keyed by Book column name

    Raises:
        CatalogError: If the resource has no usable id
    """
    if not isinstance(data, dict) or not _text(data.get('id'), None):
        raise CatalogError("Catalog returned a volume without an id")

    volume_info = _dict(data.get('volumeInfo'))
    image_links = _dict(volume_info.get('imageLinks'))

    return {
        'id': data['id'],
        'title': _text(volume_info.get('title'), UNTITLED),
        'authors': _text_list(volume_info.get('authors'), UNKNOWN_AUTHOR),
        'publisher': _text(volume_info.get('publisher'), UNKNOWN_PUBLISHER),
        'published_date': _text(volume_info.get('publishedDate'), None),
        'description': _text(volume_info.get('description'), NO_DESCRIPTION),
        'isbn13': _extract_isbn13(volume_info.get('industryIdentifiers')),
        'page_count': _page_count(volume_info.get('pageCount')),
        'categories': _text_list(volume_info.get('categories'), UNCATEGORIZED),
        'language': _text(volume_info.get('language'), NOT_AVAILABLE),
        'images': {variant: _text(image_links.get(variant), None) for variant in IMAGE_VARIANTS},
    }
