"""
Decoder for chess.com's compact live-game move lists.

  alphabet.py — token ↔ square tables and promotion hints
  moves.py    — token pairs → move descriptors
  pgn.py      — descriptors → SAN → complete PGN (headers, clocks, result)
  errors.py   — DecodeError and its subclasses

pgn.py depends on chessfinder.board, which itself imports from this package,
so nothing is re-exported here; import from the submodules directly.
"""
