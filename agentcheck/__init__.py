"""
agentcheck — Agent documentation API validator.

Checks that the code examples in agent prompt documents still match the
public API of the SDK they describe.

Rules decide pass/fail. Coverage is a name-mention proxy, nothing more.
"""

__version__ = "0.1.0"
