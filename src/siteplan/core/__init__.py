"""Core building blocks: tree model, configuration, logging and errors."""
