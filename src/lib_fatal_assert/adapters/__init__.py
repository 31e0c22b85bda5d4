"""Adapters binding the pipeline to streams, the process and the environment."""
