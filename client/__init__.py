"""
Monopoly Deal desktop client.
"""
