"""Catalog feature indexing for content-based recommendations.

Turns catalog items into TF-IDF vectors over stemmed terms, and keeps a copy
of the categorical and numeric fields the similarity engine compares.
"""

import logging
import re
from collections import Counter
from functools import lru_cache
from typing import Dict, List, Optional, Sequence

from nltk.stem import PorterStemmer
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import TfidfVectorizer

from recengine.recommender.errors import DuplicateItemError, EmptyCatalogError
from recengine.recommender.models import CatalogItem, FeatureVector, ItemId

# Configure module logger
logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"(?u)\b\w+\b")

_stemmer = PorterStemmer()


@lru_cache(maxsize=65536)
def stem(token: str) -> str:
    """Porter-stem a single lowercase token."""
    return _stemmer.stem(token)


def analyze(text: str) -> List[str]:
    """Lowercase, tokenize and stem a text blob."""
    return [stem(token) for token in TOKEN_PATTERN.findall(text.lower())]


class FeatureIndexer:
    """Builds the feature representation of a catalog.

    After ``index`` runs, ``tfidf_matrix`` holds one l2-normalized row per
    item (row ``i`` belongs to the item at catalog position ``i``) and
    ``position_of`` maps item ids to those rows.
    """

    def __init__(self):
        self.vectorizer: Optional[TfidfVectorizer] = None
        self.tfidf_matrix: Optional[csr_matrix] = None
        self.position_of: Dict[ItemId, int] = {}

    def index(self, catalog: Sequence[CatalogItem]) -> List[FeatureVector]:
        """Index every catalog item.

        Args:
            catalog: Items to index, in the order their rows should take.

        Returns:
            One FeatureVector per item, in catalog order.

        Raises:
            EmptyCatalogError: If the catalog has no items.
            DuplicateItemError: If two items share an id.
        """
        if not catalog:
            raise EmptyCatalogError()

        position_of: Dict[ItemId, int] = {}
        for position, item in enumerate(catalog):
            if item.item_id in position_of:
                raise DuplicateItemError(item.item_id)
            position_of[item.item_id] = position

        documents = [analyze(item.text_blob()) for item in catalog]

        if any(documents):
            vectorizer = TfidfVectorizer(analyzer=lambda tokens: tokens)
            tfidf_matrix = vectorizer.fit_transform(documents).tocsr()
            vocabulary_size = len(vectorizer.vocabulary_)
        else:
            # No item has any text: every text similarity is zero
            vectorizer = None
            tfidf_matrix = csr_matrix((len(catalog), 0))
            vocabulary_size = 0

        vectors = [
            FeatureVector(
                item_id=item.item_id,
                position=position,
                term_frequencies=dict(Counter(tokens)),
                category=item.category,
                subcategory=item.subcategory,
                price=float(item.price),
                rating=float(item.rating),
                manufacturer=item.manufacturer,
                is_featured=bool(item.is_featured),
                is_on_sale=bool(item.is_on_sale),
            )
            for position, (item, tokens) in enumerate(zip(catalog, documents))
        ]

        self.vectorizer = vectorizer
        self.tfidf_matrix = tfidf_matrix
        self.position_of = position_of

        logger.info(
            f"Indexed {len(vectors)} catalog items, vocabulary size={vocabulary_size}"
        )

        return vectors
