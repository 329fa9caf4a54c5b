# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Keyword vocabulary loader.

The vocabulary file maps a category to its list of keywords, e.g.::

    {"methods": ["annotation", "ocr"], "scripts": ["arabic", "cyrillic"]}

Categories only exist for editors; validation uses the flattened list.
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

import yaml

from ..exceptions import VocabularyError

logger = logging.getLogger(__name__)


YAML_SUFFIXES = (".yaml", ".yml")

# Vocabulary cache to avoid reloading files
_VOCABULARY_CACHE: Dict[Path, "KeywordVocabulary"] = {}


def flatten_keywords(categories: Mapping[str, Iterable[str]]) -> Tuple[str, ...]:
    """Flatten category lists into one tuple, keeping file order and duplicates."""
    keywords: List[str] = []
    for words in categories.values():
        keywords.extend(words)
    return tuple(keywords)


def find_duplicates(keywords: Iterable[str]) -> List[str]:
    """Return keywords that appear more than once, in first-seen order."""
    counts = Counter(keywords)
    return [word for word, count in counts.items() if count > 1]


@dataclass(frozen=True)
class KeywordVocabulary:
    """Immutable, duplicate-free set of allowed keywords."""

    categories: Mapping[str, Tuple[str, ...]] = field(hash=False)
    keywords: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "categories",
            MappingProxyType({name: tuple(words) for name, words in self.categories.items()}),
        )

    @cached_property
    def allowed(self) -> FrozenSet[str]:
        return frozenset(self.keywords)

    def __contains__(self, keyword: object) -> bool:
        return keyword in self.allowed

    def __len__(self) -> int:
        return len(self.keywords)

    def category_of(self, keyword: str) -> Optional[str]:
        for category, words in self.categories.items():
            if keyword in words:
                return category
        return None

    @classmethod
    def from_categories(cls, categories: Mapping[str, Iterable[str]], source: str = "<memory>") -> "KeywordVocabulary":
        """Build a vocabulary, failing on an empty or duplicated keyword list.

        Raises:
            VocabularyError: If the mapping is malformed, empty or has duplicates
        """
        if not isinstance(categories, Mapping):
            raise VocabularyError(
                f"Keyword vocabulary must be a mapping of category to keyword list, "
                f"got {type(categories).__name__}. Source: {source}"
            )

        normalized: Dict[str, Tuple[str, ...]] = {}
        for category, words in categories.items():
            if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
                raise VocabularyError(
                    f"Keyword category '{category}' must be a list of strings. Source: {source}"
                )
            normalized[str(category)] = tuple(words)

        keywords = flatten_keywords(normalized)
        if not keywords:
            raise VocabularyError(f"Keyword vocabulary is empty. Source: {source}")

        duplicates = find_duplicates(keywords)
        if duplicates:
            raise VocabularyError(
                f"Keyword vocabulary contains duplicate entries: {', '.join(duplicates)}. Source: {source}"
            )

        return cls(categories=normalized, keywords=keywords)


def load_keyword_vocabulary(path: Union[str, Path], use_cache: bool = True) -> KeywordVocabulary:
    """Load and check the keyword vocabulary file (JSON or YAML).

    Args:
        path: Path to the vocabulary file
        use_cache: Reuse a vocabulary already loaded from the same path

    Returns:
        The loaded :class:`KeywordVocabulary`

    Raises:
        VocabularyError: If the file is missing, unparsable or not a valid vocabulary
    """
    vocab_path = Path(path).resolve()

    if use_cache and vocab_path in _VOCABULARY_CACHE:
        return _VOCABULARY_CACHE[vocab_path]

    if not vocab_path.is_file():
        raise VocabularyError(f"Keyword vocabulary file not found: {vocab_path}")

    logger.debug(f"Loading keyword vocabulary: {vocab_path}")
    try:
        text = vocab_path.read_text(encoding="utf-8")
        # Tab-indented JSON is not YAML; only .yaml/.yml go through PyYAML.
        if vocab_path.suffix.lower() in YAML_SUFFIXES:
            content = yaml.safe_load(text)
        else:
            content = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise VocabularyError(f"Failed to parse keyword vocabulary {vocab_path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise VocabularyError(f"Failed to read keyword vocabulary {vocab_path}: {exc}") from exc

    vocabulary = KeywordVocabulary.from_categories(content, source=str(vocab_path))
    logger.info(
        f"Loaded {len(vocabulary)} keywords in {len(vocabulary.categories)} categories from {vocab_path}"
    )

    _VOCABULARY_CACHE[vocab_path] = vocabulary
    return vocabulary


def clear_cache() -> None:
    """Clear the vocabulary cache. Useful for testing."""
    _VOCABULARY_CACHE.clear()
