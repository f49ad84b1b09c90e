"""
SmartThings MCP Server
Unified capability model and platform capability registry exposed over MCP
"""

__version__ = "1.0.0"
