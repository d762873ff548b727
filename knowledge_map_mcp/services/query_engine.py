"""Query engine for learning-path and recommendation queries."""

from collections import deque
from collections.abc import Iterable

from ..models.connection import Connection
from ..models.enums import ConnectionKind, NodeState, QueryType
from ..models.node import Node
from .filters import filter_nodes
from .node_index import NodeIndex
from .state_resolver import resolve_state, resolve_states

SUGGESTED_NEXT_COUNT = 3


class QueryEngine:
    """Engine for executing queries over one catalog snapshot."""

    def __init__(self, nodes: Iterable[Node] | NodeIndex):
        self.index = nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)

    def query(
        self,
        query_type: QueryType | str,
        completed_ids: Iterable[str] | None = None,
        node_id: str | None = None,
        domain: str | None = None,
        limit: int = 10,
    ) -> dict:
        """
        Execute a query against the map.

        Args:
            query_type: Type of query to execute
            completed_ids: Ids the learner has completed
            node_id: Focus node for learning_path queries
            domain: Filter by domain
            limit: Maximum results to return

        Returns:
            Dict with query results and metadata
        """
        if isinstance(query_type, str):
            query_type = QueryType(query_type)
        completed = set(completed_ids or ())

        match query_type:
            case QueryType.READY_TO_LEARN:
                return self._query_by_state(query_type, NodeState.AVAILABLE, completed, domain, limit)
            case QueryType.LOCKED:
                return self._query_by_state(query_type, NodeState.LOCKED, completed, domain, limit)
            case QueryType.COMPLETED:
                return self._query_by_state(query_type, NodeState.COMPLETED, completed, domain, limit)
            case QueryType.SUGGESTED_NEXT:
                return self._query_by_state(
                    query_type, NodeState.AVAILABLE, completed, domain, min(limit, SUGGESTED_NEXT_COUNT)
                )
            case QueryType.LEARNING_PATH:
                if not node_id:
                    return {"error": "node_id is required for learning_path query", "nodes": []}
                return {"query_type": query_type.value, **self.get_learning_path(node_id, completed)}
            case QueryType.ALL_NODES:
                nodes = self._in_domain(domain)
                return {
                    "query_type": query_type.value,
                    "nodes": [n.to_dict() for n in nodes[:limit]],
                    "count": len(nodes[:limit]),
                }
            case _:
                raise ValueError(f"Unknown query type: {query_type}")

    def ready_to_learn(self, completed_ids: Iterable[str] | None, limit: int | None = None) -> list[Node]:
        """Available nodes in catalog order."""
        states = resolve_states(self.index, completed_ids)
        ready = [n for n in self.index if states[n.id] == NodeState.AVAILABLE]
        return ready if limit is None else ready[:limit]

    def get_learning_path(
        self,
        target_node_id: str,
        completed_ids: Iterable[str] | None = None,
        include_completed: bool = False,
    ) -> dict:
        """
        Get topologically sorted prerequisites for a target node.

        Args:
            target_node_id: Goal node
            completed_ids: Ids the learner has completed
            include_completed: Include already-completed nodes in the path?

        Returns:
            Dict with ordered path and gap analysis

        Raises:
            ValueError: If the target is not in the catalog
        """
        if target_node_id not in self.index:
            raise ValueError(f"Node '{target_node_id}' not found")
        completed = set(completed_ids or ())

        # BFS over prerequisites; unknown ids are not part of the path
        all_prereqs: set[str] = set()
        edges_in_path: list[Connection] = []
        queue = deque([target_node_id])
        visited = {target_node_id}

        while queue:
            current_id = queue.popleft()
            for prereq_id in self.index.get(current_id).prereqs:
                if prereq_id not in self.index:
                    continue
                edges_in_path.append(
                    Connection(source_id=prereq_id, target_id=current_id, kind=ConnectionKind.PREREQUISITE)
                )
                if prereq_id not in visited:
                    visited.add(prereq_id)
                    all_prereqs.add(prereq_id)
                    queue.append(prereq_id)

        sorted_path = self._topological_sort(all_prereqs | {target_node_id}, edges_in_path)

        path_nodes = []
        gaps = []
        for node_id in sorted_path:
            node = self.index.get(node_id)
            if node.id not in completed:
                gaps.append(node)
            if include_completed or node.id not in completed:
                path_nodes.append(node)

        return {
            "target": target_node_id,
            "path": [n.to_dict(include_subnodes=False) for n in path_nodes],
            "gaps": [n.to_dict(include_subnodes=False) for n in gaps],
            "total_prerequisites": len(all_prereqs),
            "gaps_count": len(gaps),
            "ready": resolve_state(target_node_id, completed, self.index) != NodeState.LOCKED,
        }

    def _topological_sort(self, node_ids: set[str], edges: list[Connection]) -> list[str]:
        """Topological sort of nodes based on prerequisite edges."""
        # Catalog order breaks ties so the result is deterministic
        ordered = [n.id for n in self.index if n.id in node_ids]
        ordered = list(dict.fromkeys(ordered))
        in_degree = {node_id: 0 for node_id in ordered}
        adj_list: dict[str, list[str]] = {node_id: [] for node_id in ordered}

        for edge in dict.fromkeys((e.source_id, e.target_id) for e in edges):
            source_id, target_id = edge
            adj_list[source_id].append(target_id)
            in_degree[target_id] += 1

        # Kahn's algorithm
        queue = deque([n for n in ordered if in_degree[n] == 0])
        result = []

        while queue:
            node = queue.popleft()
            result.append(node)

            for neighbor in adj_list[node]:
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        # Nodes on a prerequisite cycle never reach in-degree 0; keep them as gaps
        placed = set(result)
        result.extend(n for n in ordered if n not in placed)
        return result

    def _in_domain(self, domain: str | None) -> list[Node]:
        return filter_nodes(self.index, [domain] if domain else ())

    def _query_by_state(
        self,
        query_type: QueryType,
        state: NodeState,
        completed: set[str],
        domain: str | None,
        limit: int,
    ) -> dict:
        states = resolve_states(self.index, completed)
        nodes = [n for n in self._in_domain(domain) if states[n.id] == state][:limit]
        return {
            "query_type": query_type.value,
            "nodes": [n.to_dict(include_subnodes=False) for n in nodes],
            "count": len(nodes),
        }
