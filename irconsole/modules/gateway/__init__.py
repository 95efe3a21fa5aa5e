"""
Gateway Module - Black Box Interface

Purpose: Run a shell command on the remote host under an optional account
Interface: ExecutionGateway, HttpExecutionGateway.execute(), list_connections()
Hidden: Transport, backend RPC names, error body decoding

Can be replaced with any object satisfying the ExecutionGateway protocol.
"""

from .gateway import ExecutionGateway, ExecutionOutcome, ExecutionResult, HttpExecutionGateway

__all__ = ["ExecutionGateway", "ExecutionOutcome", "ExecutionResult", "HttpExecutionGateway"]
