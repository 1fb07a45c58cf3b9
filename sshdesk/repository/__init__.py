"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services avoid SQL strings.
Functions take an open connection and never commit or open transactions.
"""
