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

"""JSON record reader with optional caching and source locations."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from ..exceptions import RecordLoadError
from .source_location import SourceMap

logger = logging.getLogger(__name__)


class RecordLoader:
    """Reads record files and maps JSON pointers to line/column."""

    def __init__(self, cache_enabled: bool = False):
        """Initialize the loader.

        Args:
            cache_enabled: Keep parsed records in memory, keyed by path
        """
        self.cache_enabled = cache_enabled
        self._cache: Dict[Path, Any] = {}
        self._source_cache: Dict[Path, SourceMap] = {}

    @staticmethod
    def _json_pointer_escape(token: str) -> str:
        # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
        return token.replace("~", "~0").replace("/", "~1")

    @classmethod
    def build_source_map(cls, content: str) -> SourceMap:
        """Build a mapping from JSON pointers to 1-based line/column.

        JSON is (almost entirely) valid YAML flow syntax, so PyYAML's node
        composer gives us start marks without a second JSON parser. The map is
        best effort: documents PyYAML cannot compose get an empty map.
        """
        source_map: SourceMap = {}

        try:
            root = yaml.compose(content, Loader=yaml.SafeLoader)
        except yaml.YAMLError:
            return source_map

        if root is None:
            return source_map

        def _record(path: str, node) -> None:
            mark = getattr(node, "start_mark", None)
            if mark is None:
                return
            # PyYAML uses 0-based line/column
            source_map[path] = {"line": int(mark.line) + 1, "column": int(mark.column) + 1}

        def _walk(node, path: str) -> None:
            _record(path, node)

            if isinstance(node, yaml.nodes.MappingNode):
                for key_node, value_node in node.value:
                    key = getattr(key_node, "value", None)
                    if key is None:
                        continue
                    _walk(value_node, f"{path}/{cls._json_pointer_escape(str(key))}")
            elif isinstance(node, yaml.nodes.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    _walk(item_node, f"{path}/{idx}")

        _walk(root, "")
        return source_map

    def load_record_from_string_with_source(self, content: str, source: str = "<string>") -> Tuple[Any, SourceMap]:
        """Parse record JSON from a string and return (data, source_map)."""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise RecordLoadError(f"Failed to parse JSON {source}: {exc}") from exc
        return data, self.build_source_map(content)

    def load_record_with_source(self, file_path: Union[str, Path]) -> Tuple[Any, SourceMap]:
        """Load a record file and return (data, source_map).

        source_map keys are JSON pointers (e.g. "/project/keywords/0").
        """
        path = Path(file_path)

        if not path.exists():
            raise RecordLoadError(f"Record file not found: {path}")

        if not path.is_file():
            raise RecordLoadError(f"Path is not a file: {path}")

        if self.cache_enabled and path in self._cache:
            logger.debug(f"Loading record from cache: {path}")
            return self._cache[path], self._source_cache[path]

        logger.debug(f"Loading record file: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RecordLoadError(f"Failed to read record file {path}: {exc}") from exc

        data, source_map = self.load_record_from_string_with_source(content, source=str(path))

        if self.cache_enabled:
            self._cache[path] = data
            self._source_cache[path] = source_map

        return data, source_map

    def load_record(self, file_path: Union[str, Path]) -> Any:
        """Load a record file without source locations."""
        data, _ = self.load_record_with_source(file_path)
        return data

    def clear_cache(self) -> None:
        self._cache.clear()
        self._source_cache.clear()


# Shared loader instance
record_loader = RecordLoader()
