"""Engine of a single-player Sokoban game: XSB parser, moves/undo, solution store."""
