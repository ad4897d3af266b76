"""MCP (Model Context Protocol) server exposing memkit to assistants."""
