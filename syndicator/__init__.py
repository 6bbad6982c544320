"""
Syndication deal engine: pro forma, LP/GP waterfall and returns.
"""
