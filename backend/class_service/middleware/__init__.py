# Middleware package init
"""
Class Service — Middleware Package
===================================

Middleware Chain (request direction):
    Request → [CORS] → [Request Context] → [Auth Gateway] → [GZip] → Route Handler

    1. CORS first: browser preflights are answered without a token
    2. Request Context: correlation ID + access log line
    3. Auth Gateway: token extraction and validation against the OAuth service
"""
