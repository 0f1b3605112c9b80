"""
Interface package: communication protocols for the draughts engine.

Modules:
    protocol - Line-oriented engine protocol handler.
               Reads commands from stdin, writes responses to stdout.
               Can be run as a standalone script: python interface/protocol.py
"""
