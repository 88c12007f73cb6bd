"""
Definitions shared by the engine and the client.
"""
