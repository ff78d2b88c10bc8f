"""
Filtrage et tri du catalogue (fonctions pures).
Ordre d'application: recherche texte, catégorie, matériaux, couleurs, fourchette de prix, puis tri stable.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, Iterable, List, Sequence, Tuple

from .models import Product

ALL_CATEGORIES = "all"
DEFAULT_PRICE_RANGE: Tuple[float, float] = (0.0, 100.0)
DEFAULT_SORT = "newest"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created(p: Product) -> datetime:
    return p.created_at or _EPOCH


# clé de tri -> (fonction de clé, ordre décroissant)
SORTERS: Dict[str, Tuple[Callable[[Product], object], bool]] = {
    "newest": (_created, True),
    "oldest": (_created, False),
    "price-low": (lambda p: p.price, False),
    "price-high": (lambda p: p.price, True),
    "name-az": (lambda p: p.title.casefold(), False),
    "name-za": (lambda p: p.title.casefold(), True),
    "rating": (lambda p: p.rating, True),
    "popular": (lambda p: p.reviews, True),
}


@dataclass(frozen=True)
class ProductCriteria:
    search: str = ""
    category: str = ALL_CATEGORIES
    materials: FrozenSet[str] = field(default_factory=frozenset)
    colors: FrozenSet[str] = field(default_factory=frozenset)
    price_range: Tuple[float, float] = DEFAULT_PRICE_RANGE
    sort_by: str = DEFAULT_SORT


def _matches_search(p: Product, term: str) -> bool:
    haystacks = (p.title, p.description, p.materials)
    return any(term in (h or "").casefold() for h in haystacks)


def filter_products(products: Iterable[Product], criteria: ProductCriteria = ProductCriteria()) -> List[Product]:
    """
    Applique les critères et retourne une nouvelle liste triée.
    - search: sous-chaîne insensible à la casse (titre, description, matériau)
    - category == "all": pas de filtre de catégorie
    - materials / colors vides: pas de filtre; sinon appartenance / intersection
    - price_range: bornes incluses
    Soulève ValueError pour une clé de tri inconnue.
    """
    if criteria.sort_by not in SORTERS:
        raise ValueError(f"unknown sort key: {criteria.sort_by!r}")

    result = list(products)
    term = criteria.search.strip().casefold()
    if term:
        result = [p for p in result if _matches_search(p, term)]
    if criteria.category != ALL_CATEGORIES:
        result = [p for p in result if p.category == criteria.category]
    if criteria.materials:
        result = [p for p in result if p.materials in criteria.materials]
    if criteria.colors:
        result = [p for p in result if criteria.colors.intersection(p.colors)]
    low, high = criteria.price_range
    result = [p for p in result if low <= p.price <= high]

    key, reverse = SORTERS[criteria.sort_by]
    return sorted(result, key=key, reverse=reverse)


def category_counts(products: Sequence[Product]) -> Dict[str, int]:
    counts: Dict[str, int] = {ALL_CATEGORIES: len(products)}
    for p in products:
        counts[p.category] = counts.get(p.category, 0) + 1
    return counts


def has_active_filters(criteria: ProductCriteria) -> bool:
    return bool(
        criteria.search.strip()
        or criteria.category != ALL_CATEGORIES
        or criteria.materials
        or criteria.colors
        or criteria.price_range != DEFAULT_PRICE_RANGE
    )
