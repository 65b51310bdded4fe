"""Small helpers shared by the pipeline and CLI layers."""
