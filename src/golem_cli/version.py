"""Version string for golem-cli, reported by ``--version``."""

__version__: str = "0.1.0"
