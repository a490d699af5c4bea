"""Core authentication primitives: passwords, tokens, errors and scope."""
