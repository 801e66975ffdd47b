"""Step Gate — wizard step navigation on top of the validator."""
