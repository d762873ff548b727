"""
Knowledge Map MCP Server

An MCP server exposing the knowledge map engine: node states, expand/collapse
visibility, filtering, collision-free layout and progress. The server holds no
learner state; completed and expanded ids are passed in on every call.
"""

import logging
import os

from fastmcp import FastMCP

from .catalog.loader import Catalog, CatalogError, set_catalog_path
from .models.enums import NodeState, QueryType
from .services.connections import build_connections
from .services.filters import filter_nodes as apply_filters
from .services.layout_engine import layout
from .services.mermaid_generator import generate_mermaid
from .services.progress import calculate_progress
from .services.progress import get_statistics as compute_statistics
from .services.query_engine import QueryEngine
from .services.state_resolver import resolve_state, resolve_states
from .services.visibility import get_visible_nodes
from .services.visibility import toggle_expansion as toggle_expansion_set
from .services.visibility import toggle_filter as toggle_filter_tuple

logger = logging.getLogger(__name__)

# Initialize the MCP server
mcp = FastMCP(
    "Knowledge Map",
    instructions="Gamified learning map. Nodes unlock when their prerequisites are "
    "completed; parent nodes expand to show subnodes. Pass the learner's completed "
    "node ids and expanded parent ids to every call.",
)

# Catalog is read on first use from the configured path
catalog = Catalog()


@mcp.tool()
def get_map(
    completed_ids: list[str] | None = None,
    expanded_ids: list[str] | None = None,
    domain_filters: list[str] | None = None,
    search_term: str = "",
) -> dict:
    """
    Get the render-ready map: positioned nodes with states, edges and category labels.

    Args:
        completed_ids: Node IDs the learner has completed
        expanded_ids: Parent node IDs whose subnodes should be shown
        domain_filters: Only keep nodes in these domains. Empty keeps all.
        search_term: Only keep nodes whose name contains this text (case-insensitive)

    Returns:
        Nodes with x/y and state, connections between drawn nodes,
        category labels and progress over the visible (unfiltered) nodes

    Example:
        get_map(completed_ids=["quantity-concept"], expanded_ids=["calculus-parent"])
    """
    try:
        result = layout(catalog.dataset, expanded_ids)
        states = resolve_states(catalog.index, completed_ids)
        drawn = apply_filters(result.nodes, domain_filters, search_term)

        return {
            "success": True,
            "nodes": [
                {**n.to_dict(include_subnodes=False), "state": states[n.id].value}
                for n in drawn
            ],
            "connections": [c.to_dict() for c in build_connections(drawn)],
            "categoryLabels": result.to_dict()["categoryLabels"],
            "progress": calculate_progress(get_visible_nodes(catalog.nodes, expanded_ids), completed_ids),
        }
    except CatalogError as e:
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.exception("get_map failed")
        return {"success": False, "error": f"Failed to build map: {str(e)}"}


@mcp.tool()
def get_node_state(node_id: str, completed_ids: list[str] | None = None) -> dict:
    """
    Get whether a node is locked, available or completed.

    Args:
        node_id: ID or name of the node
        completed_ids: Node IDs the learner has completed

    Returns:
        The node's state and any prerequisites still missing

    Example:
        get_node_state(node_id="operations", completed_ids=["number-systems"])
    """
    try:
        resolved_id = catalog.index.resolve_id(node_id) or node_id
        state = resolve_state(resolved_id, completed_ids, catalog.index)
        node = catalog.index.get(resolved_id)
        completed = set(completed_ids or [])
        missing = [p for p in node.prereqs if p not in completed] if node else []

        return {
            "success": True,
            "node_id": resolved_id,
            "state": state.value,
            "known": node is not None,
            "missing_prereqs": missing if state != NodeState.COMPLETED else [],
        }
    except CatalogError as e:
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.exception("get_node_state failed")
        return {"success": False, "error": f"Failed to resolve state: {str(e)}"}


@mcp.tool()
def toggle_expansion(node_id: str, expanded_ids: list[str] | None = None) -> dict:
    """
    Expand a collapsed parent node or collapse an expanded one.

    Args:
        node_id: Parent node ID to toggle
        expanded_ids: Currently expanded parent IDs

    Returns:
        The new list of expanded IDs (the input is not modified)
    """
    new_ids = toggle_expansion_set(node_id, expanded_ids)
    return {
        "success": True,
        "expanded_ids": sorted(new_ids),
        "expanded": node_id in new_ids,
    }


@mcp.tool()
def toggle_filter(domain: str, active_filters: list[str] | None = None) -> dict:
    """
    Turn a domain filter on or off.

    Args:
        domain: Domain to toggle
        active_filters: Currently active domain filters

    Returns:
        The new list of active filters
    """
    new_filters = toggle_filter_tuple(domain, active_filters)
    return {"success": True, "active_filters": list(new_filters), "active": domain in new_filters}


@mcp.tool()
def filter_nodes(
    domain_filters: list[str] | None = None,
    search_term: str = "",
    expanded_ids: list[str] | None = None,
) -> dict:
    """
    List visible nodes matching domain filters and a name search.

    Args:
        domain_filters: Only keep nodes in these domains. Empty keeps all.
        search_term: Case-insensitive substring of the node name
        expanded_ids: Expanded parent IDs; subnodes of other parents are hidden

    Returns:
        Matching nodes in catalog order
    """
    try:
        nodes = apply_filters(catalog.nodes, domain_filters, search_term, expanded_ids or [])
        return {
            "success": True,
            "nodes": [n.to_dict(include_subnodes=False) for n in nodes],
            "count": len(nodes),
        }
    except CatalogError as e:
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.exception("filter_nodes failed")
        return {"success": False, "error": f"Failed to filter nodes: {str(e)}"}


@mcp.tool()
def get_progress(completed_ids: list[str] | None = None, expanded_ids: list[str] | None = None) -> dict:
    """
    Get the completion percentage of the currently visible nodes.

    Args:
        completed_ids: Node IDs the learner has completed
        expanded_ids: Expanded parent IDs

    Returns:
        Progress percentage (0-100) and counts
    """
    try:
        visible = get_visible_nodes(catalog.nodes, expanded_ids)
        completed = set(completed_ids or [])
        return {
            "success": True,
            "progress": calculate_progress(visible, completed),
            "visible_count": len(visible),
            "completed_visible_count": sum(1 for n in visible if n.id in completed),
        }
    except CatalogError as e:
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.exception("get_progress failed")
        return {"success": False, "error": f"Failed to get progress: {str(e)}"}


@mcp.tool()
def get_learning_path(
    target_node: str,
    completed_ids: list[str] | None = None,
    include_completed: bool = False,
) -> dict:
    """
    Get the ordered learning path to reach a target node.

    Returns a topologically sorted list of prerequisites, highlighting
    which nodes the learner still needs to complete (gaps).

    Args:
        target_node: The goal node (ID or name)
        completed_ids: Node IDs the learner has completed
        include_completed: Whether to include completed nodes in the path

    Example:
        get_learning_path(target_node="quantum-mechanics", completed_ids=["scientific-method"])
    """
    try:
        resolved_id = catalog.index.resolve_id(target_node)
        if not resolved_id:
            return {"success": False, "error": f"Target node '{target_node}' not found"}

        engine = QueryEngine(catalog.index)
        path_result = engine.get_learning_path(resolved_id, completed_ids, include_completed)
        return {"success": True, **path_result}
    except ValueError as e:
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.exception("get_learning_path failed")
        return {"success": False, "error": f"Failed to get learning path: {str(e)}"}


@mcp.tool()
def query_map(
    query_type: str,
    completed_ids: list[str] | None = None,
    node_id: str | None = None,
    domain: str | None = None,
    limit: int = 10,
) -> dict:
    """
    Query the map for learning insights.

    Args:
        query_type: Type of query to execute. One of:
            - "ready_to_learn": Nodes whose prerequisites are all completed
            - "suggested_next": The first few ready nodes
            - "learning_path": Ordered prerequisites for a node (requires node_id)
            - "locked": Nodes still blocked by prerequisites
            - "completed": Nodes already completed
            - "all_nodes": All nodes in the catalog
        completed_ids: Node IDs the learner has completed
        node_id: Focus node for "learning_path"
        domain: Filter results by domain (e.g., "mathematics")
        limit: Maximum number of results to return. Default 10.
    """
    try:
        try:
            q_type = QueryType(query_type)
        except ValueError:
            valid_types = [t.value for t in QueryType]
            return {
                "success": False,
                "error": f"Invalid query_type '{query_type}'. Must be one of: {valid_types}",
            }

        resolved_node_id = None
        if node_id:
            resolved_node_id = catalog.index.resolve_id(node_id)
            if not resolved_node_id:
                return {"success": False, "error": f"Node '{node_id}' not found"}

        result = QueryEngine(catalog.index).query(
            query_type=q_type,
            completed_ids=completed_ids,
            node_id=resolved_node_id,
            domain=domain,
            limit=limit,
        )
        return {"success": True, **result}
    except Exception as e:
        logger.exception("query_map failed")
        return {"success": False, "error": f"Query failed: {str(e)}"}


@mcp.tool()
def get_statistics(completed_ids: list[str] | None = None, expanded_ids: list[str] | None = None) -> dict:
    """
    Get summary statistics for learning progress.

    Args:
        completed_ids: Node IDs the learner has completed
        expanded_ids: Expanded parent IDs. If None, statistics cover every node.

    Returns:
        Statistics including total_nodes, state_distribution,
        progress_by_domain and overall_progress
    """
    try:
        stats = compute_statistics(catalog.nodes, completed_ids, expanded_ids)
        return {"success": True, **stats}
    except Exception as e:
        logger.exception("get_statistics failed")
        return {"success": False, "error": f"Failed to get statistics: {str(e)}"}


@mcp.tool()
def export_mermaid(
    completed_ids: list[str] | None = None,
    expanded_ids: list[str] | None = None,
    title: str | None = None,
) -> dict:
    """
    Export the visible map as a Mermaid flowchart styled by node state.

    Args:
        completed_ids: Node IDs the learner has completed
        expanded_ids: Expanded parent IDs
        title: Optional subgraph title
    """
    try:
        visible = get_visible_nodes(catalog.nodes, expanded_ids)
        states = resolve_states(catalog.index, completed_ids)
        mermaid = generate_mermaid(visible, build_connections(visible), states, title)
        return {"success": True, "mermaid": mermaid, "node_count": len(visible)}
    except Exception as e:
        logger.exception("export_mermaid failed")
        return {"success": False, "error": f"Failed to export diagram: {str(e)}"}


def main():
    """Run the MCP server."""
    logging.basicConfig(
        level=os.environ.get("KNOWLEDGE_MAP_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Check for custom catalog path from environment
    catalog_path = os.environ.get("KNOWLEDGE_MAP_CATALOG_PATH")
    if catalog_path:
        set_catalog_path(catalog_path)
        catalog.reload()

    port = os.environ.get("PORT")
    if port:
        # HTTP mode
        import uvicorn
        from starlette.middleware.cors import CORSMiddleware

        app = mcp.http_app()
        app = CORSMiddleware(
            app=app,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["mcp-session-id", "mcp-protocol-version"],
            max_age=86400,
        )

        uvicorn.run(app, host="0.0.0.0", port=int(port))
    else:
        # Standard stdio mode for local usage
        mcp.run()


if __name__ == "__main__":
    main()
