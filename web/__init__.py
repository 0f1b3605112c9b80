"""
Web application package for the draughts engine.

Provides a FastAPI-based REST API exposing the engine's request/response
contract: legal moves, move application, highlight destinations and the
computer player's move.
"""
