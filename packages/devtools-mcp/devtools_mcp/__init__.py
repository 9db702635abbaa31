"""MCP server exposing a Chrome DevTools connection."""
