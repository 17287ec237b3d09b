from __future__ import annotations


class GasRefundError(Exception):
    """Base class for every error that aborts a reimbursement run."""


class ConfigurationError(GasRefundError):
    """Missing or empty RPC_URL, or an unreadable/malformed env file."""


class NetworkError(GasRefundError):
    """Any JSON-RPC failure: transport, HTTP status, node error or not-found."""


class RPCTimeoutError(NetworkError):
    """The shared request deadline expired."""


class FileWriteError(GasRefundError):
    """One of the output documents could not be written."""
