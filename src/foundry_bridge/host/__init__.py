"""Host side of the bridge: the facade protocol and its implementations."""
