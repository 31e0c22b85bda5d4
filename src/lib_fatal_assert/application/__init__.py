"""Application layer: ports, registries, the reentrancy latch and the reporter."""
