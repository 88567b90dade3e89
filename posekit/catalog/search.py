"""
Catalog search

Fuzzy, weighted text search over catalog entries combined with
theme / category / safety / tag filters. Matching uses rapidfuzz.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from rapidfuzz import fuzz, utils

from ..core.config import SearchConfig
from ..core.constants import (
    SEARCH_FIELD_WEIGHTS,
    SEARCH_MIN_MATCH_CHAR_LENGTH,
    SEARCH_RESULT_LIMIT,
    SEARCH_SUGGESTION_LIMIT,
    SEARCH_THRESHOLD,
)

logger = logging.getLogger(__name__)

FILTER_TYPES = ('themes', 'categories', 'safety_levels', 'tags')


@dataclass(frozen=True)
class CatalogItem:
    """One searchable catalog entry"""
    id: str
    title: str
    theme: str
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()
    description: Optional[str] = None
    safety_level: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CatalogItem":
        """
        Create instance from dictionary

        Accepts both safety_level and safetyLevel. Missing id, title or
        theme raises KeyError.
        """
        return cls(
            id=str(d['id']),
            title=d['title'],
            theme=d['theme'],
            category=d.get('category'),
            tags=tuple(d.get('tags') or ()),
            description=d.get('description'),
            safety_level=d.get('safety_level', d.get('safetyLevel')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'title': self.title,
            'theme': self.theme,
            'category': self.category,
            'tags': list(self.tags),
            'description': self.description,
            'safety_level': self.safety_level,
        }

    def field_values(self) -> Dict[str, List[str]]:
        """Searchable text per weighted field"""
        return {
            'title': [self.title],
            'theme': [self.theme],
            'category': [self.category] if self.category else [],
            'tags': list(self.tags),
            'description': [self.description] if self.description else [],
        }


@dataclass
class SearchFilters:
    """
    Active filter values

    Empty lists do not filter. Items without a category, safety level
    or tags pass the corresponding filter.
    """
    themes: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    safety_levels: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    def _values(self, filter_type: str) -> List[str]:
        if filter_type not in FILTER_TYPES:
            raise ValueError(f"Unknown filter type {filter_type!r}, expected one of {FILTER_TYPES}")
        return getattr(self, filter_type)

    def add(self, filter_type: str, value: str) -> None:
        values = self._values(filter_type)
        if value not in values:
            values.append(value)

    def remove(self, filter_type: str, value: str) -> None:
        values = self._values(filter_type)
        setattr(self, filter_type, [v for v in values if v != value])

    def toggle(self, filter_type: str, value: str) -> bool:
        """Add or remove a value; returns True if it is now active"""
        if value in self._values(filter_type):
            self.remove(filter_type, value)
            return False
        self.add(filter_type, value)
        return True

    def clear(self) -> None:
        for filter_type in FILTER_TYPES:
            setattr(self, filter_type, [])

    @property
    def active_count(self) -> int:
        return sum(len(getattr(self, filter_type)) for filter_type in FILTER_TYPES)

    def matches(self, item: CatalogItem) -> bool:
        """Check an item against every active filter"""
        if self.themes and item.theme not in self.themes:
            return False
        if self.categories and item.category and item.category not in self.categories:
            return False
        if self.safety_levels and item.safety_level and item.safety_level not in self.safety_levels:
            return False
        if self.tags and item.tags:
            wanted = [tag.lower() for tag in self.tags]
            if not any(w in tag.lower() for w in wanted for tag in item.tags):
                return False
        return True


@dataclass
class SearchResult:
    """Catalog item with its relevance in [0, 1]"""
    item: CatalogItem
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {**self.item.to_dict(), 'score': round(self.score, 6)}


def _field_score(query: str, value: str) -> float:
    """Match quality of a processed query against one field value, 0-100"""
    value = utils.default_process(value)
    if not query or not value:
        return 0.0
    # A short value inside a long query is not a match for the query
    if len(value) < len(query):
        return fuzz.ratio(query, value)
    return fuzz.partial_ratio(query, value)


class CatalogSearch:
    """
    Search a pose catalog by text and filters

    A query matches an item when at least one field scores at or above
    1 - threshold. Matches are ranked by the weighted score of their
    matching fields; ties keep catalog order.

    Example:
        >>> catalog = CatalogSearch([{"id": 1, "title": "Bride by the window", "theme": "wedding"}])
        >>> [r.item.id for r in catalog.search("weding")]
        ['1']
    """

    def __init__(
        self,
        items: Iterable[Union[CatalogItem, Mapping[str, Any]]],
        threshold: float = SEARCH_THRESHOLD,
        enable_fuzzy: bool = True,
        min_match_char_length: int = SEARCH_MIN_MATCH_CHAR_LENGTH,
        limit: int = SEARCH_RESULT_LIMIT,
    ):
        self.items = [
            item if isinstance(item, CatalogItem) else CatalogItem.from_dict(item)
            for item in items
        ]
        self.threshold = threshold
        self.enable_fuzzy = enable_fuzzy
        self.min_match_char_length = min_match_char_length
        self.limit = limit

    @classmethod
    def from_config(
        cls,
        items: Iterable[Union[CatalogItem, Mapping[str, Any]]],
        config: SearchConfig,
    ) -> "CatalogSearch":
        """Build with the settings of a SearchConfig"""
        return cls(
            items,
            threshold=config.threshold,
            enable_fuzzy=config.enable_fuzzy,
            min_match_char_length=config.min_match_char_length,
            limit=config.limit,
        )

    def filter_items(self, filters: Optional[SearchFilters] = None) -> List[CatalogItem]:
        """Items passing the filters, in catalog order"""
        if filters is None:
            return list(self.items)
        return [item for item in self.items if filters.matches(item)]

    def _fuzzy_score(self, query: str, item: CatalogItem) -> Optional[float]:
        cutoff = (1.0 - self.threshold) * 100
        total = 0.0
        matched = False
        for name, values in item.field_values().items():
            best = max((_field_score(query, value) for value in values), default=0.0)
            if best >= cutoff:
                matched = True
                total += SEARCH_FIELD_WEIGHTS[name] * best / 100
        if not matched:
            return None
        return total / sum(SEARCH_FIELD_WEIGHTS.values())

    @staticmethod
    def _contains(query: str, item: CatalogItem) -> bool:
        query = query.lower()
        return any(
            query in value.lower()
            for values in item.field_values().values()
            for value in values
        )

    def search(self, query: str = "", filters: Optional[SearchFilters] = None) -> List[SearchResult]:
        """
        Search filtered items by text

        Queries shorter than min_match_char_length, or any query when
        fuzzy matching is off, use case-insensitive substring matching
        and keep catalog order.

        Args:
            query: Free text; blank returns every filtered item
            filters: Active filters

        Returns:
            List of SearchResult, best first, at most `limit` for text
            queries
        """
        candidates = self.filter_items(filters)
        query = query.strip()
        if not query:
            return [SearchResult(item, 1.0) for item in candidates]

        if not self.enable_fuzzy or len(query) < self.min_match_char_length:
            results = [SearchResult(item, 1.0) for item in candidates if self._contains(query, item)]
        else:
            processed = utils.default_process(query)
            results = []
            for item in candidates:
                score = self._fuzzy_score(processed, item)
                if score is not None:
                    results.append(SearchResult(item, score))
            # sorted() is stable, so equal scores keep catalog order
            results = sorted(results, key=lambda r: r.score, reverse=True)

        logger.debug("Query %r matched %d of %d items", query, len(results), len(candidates))
        return results[:self.limit]

    def available_filters(self) -> Dict[str, List[str]]:
        """Sorted distinct filter values present in the catalog"""
        themes, categories, safety_levels, tags = set(), set(), set(), set()
        for item in self.items:
            themes.add(item.theme)
            if item.category:
                categories.add(item.category)
            if item.safety_level:
                safety_levels.add(item.safety_level)
            tags.update(item.tags)
        return {
            'themes': sorted(themes),
            'categories': sorted(categories),
            'safety_levels': sorted(safety_levels),
            'tags': sorted(tags),
        }

    def suggestions(self, partial: str, limit: int = SEARCH_SUGGESTION_LIMIT) -> List[str]:
        """
        Titles, themes and tags containing `partial`

        Returns nothing for fewer than two characters.
        """
        partial = partial.strip().lower()
        if len(partial) < 2:
            return []

        found: Dict[str, None] = {}
        for item in self.items:
            for value in (item.title, item.theme, *item.tags):
                if partial in value.lower():
                    found.setdefault(value)
        return list(found)[:limit]

    def stats(self, query: str = "", filters: Optional[SearchFilters] = None) -> Dict[str, Any]:
        """Counts for a query / filter combination"""
        return {
            'total_items': len(self.items),
            'filtered_items': len(self.filter_items(filters)),
            'search_results': len(self.search(query, filters)),
            'active_filters': filters.active_count if filters is not None else 0,
            'has_query': bool(query.strip()),
        }
