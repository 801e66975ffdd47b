"""Record Validator — per-field and per-section verdicts for an offer record."""
