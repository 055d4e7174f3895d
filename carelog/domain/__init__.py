"""Framework-agnostic domain models and the 24-hour time invariant."""
