from __future__ import annotations

from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")


class GraphExecutor:
    """Chạy 1 compiled graph và convert final state sang result"""

    @staticmethod
    def execute(
        graph: Any,
        init_state: Dict[str, Any],
        to_result: Callable[[Dict[str, Any]], T],
        config: Optional[Dict[str, Any]] = None,
    ) -> T:
        final_state = graph.invoke(init_state, config=config)
        return to_result(final_state)
