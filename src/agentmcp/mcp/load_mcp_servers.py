import os
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import agentmcp.util.config as config
import agentmcp.util.agentmcp_logger as _agentmcp_logger
from agentmcp.mcp.manager import MCPServerManager
from agentmcp.mcp.mcp_server import MCPServer, SessionFactory
from agentmcp.mcp.mcp_types import MCPServerEntry

logger = _agentmcp_logger.getLogger(__name__)


def _expand(value: str) -> str:
    return os.path.expanduser(os.path.expandvars(value))


def _parse_entry(sid: str, scfg: Dict[str, Any]) -> MCPServerEntry:
    endpoint = scfg.get("endpoint") or scfg.get("url")
    if not endpoint:
        raise ValueError("no 'endpoint' or 'url'")
    headers = {str(k): _expand(str(v)) for k, v in (scfg.get("headers") or {}).items()}
    timeout = scfg.get("timeoutSeconds", scfg.get("timeout_seconds"))
    return MCPServerEntry(
        id=sid,
        endpoint=_expand(str(endpoint)),
        headers=headers,
        timeout_seconds=int(timeout) if timeout is not None else None,
    )


def load_mcp_servers(
    config_path: str | Path = config.mcp_config_path,
    session_factory: Optional[SessionFactory] = None,
) -> MCPServerManager:
    """
    Load MCP servers from an mcp_config.json and return them in a manager.

        {"servers": {"<id>": {"endpoint": "https://...", "headers": {...}, "timeoutSeconds": 30}}}

    `url` is accepted in place of `endpoint`. `${VAR}` and `~` are expanded in
    endpoints and header values. Entries with `"disabled": true` are skipped;
    invalid entries are logged and skipped. No connection is made here.
    """
    config_path = Path(config_path)
    with config_path.open("r", encoding="utf-8") as f:
        cfg = json.load(f)

    servers: Dict[str, Dict[str, Any]] = cfg.get("servers", {})
    if not servers:
        raise ValueError(f"{config_path.name} has no 'servers' entries")

    mgr = MCPServerManager()
    failures: Dict[str, str] = {}
    added: List[str] = []

    for sid, scfg in servers.items():
        if scfg.get("disabled", False):
            logger.debug("[MCP] '%s': skipping disabled server", sid)
            continue
        try:
            entry = _parse_entry(sid, scfg)
            server = MCPServer(entry.endpoint, entry.headers, entry.timeout_seconds, session_factory=session_factory)
            mgr.add_server(entry.id, server)
            added.append(sid)
        except (ValueError, TypeError) as e:
            failures[sid] = str(e)

    if failures:
        logger.warning("[MCP] Some servers could not be configured:")
        for sid, msg in failures.items():
            logger.warning("  - %s: %s", sid, msg)

    logger.debug("[MCP] Loaded servers: %s", added)
    return mgr
