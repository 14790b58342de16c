"""
Command-line interface for the TokenMint SDK.
"""
