"""Click commands registered on the projmux root group."""
