"""Command surface for external callers.

JSON-line requests are dispatched by BridgeCommandHandler against a
working circuit; responses carry plain data only.
"""
