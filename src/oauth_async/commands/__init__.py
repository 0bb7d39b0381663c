"""Built-in CLI sub-commands for oauth-async."""
