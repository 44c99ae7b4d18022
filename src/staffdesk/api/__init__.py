"""HTTP surface: shared dependencies, envelopes and the root router."""
