"""Domain types shared by the CLI, the loader and the processing service."""
