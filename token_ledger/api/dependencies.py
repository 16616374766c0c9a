"""
Request dependencies
"""

from fastapi import Request

from ..ledger import LedgerEngine


def get_engine(request: Request) -> LedgerEngine:
    """Ledger served by the application handling this request"""
    return request.app.state.engine
