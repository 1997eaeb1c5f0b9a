"""Pure JSON tooling core: no widgets, no shared mutable state."""
