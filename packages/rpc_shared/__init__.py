"""Shared configuration and logging utilities for ``rpc_errors`` services."""
