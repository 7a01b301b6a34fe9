"""Pure domain rules (validation, geography, target vocabulary); no I/O."""
